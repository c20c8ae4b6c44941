"""Rich terminal rendering for debate events."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from modules.debates.models import (
    BaselineFairEvent,
    BaselineMiniEvent,
    CoordinationEvent,
    CritiquesCompleteEvent,
    DebateEvent,
    ErrorEvent,
    EvaluationEvent,
    JurorDeltaEvent,
    PhaseEvent,
    PositionsCompleteEvent,
    RebuttalsCompleteEvent,
    RevisionsCompleteEvent,
    UsageEvent,
    VerdictEvent,
)
from modules.usage.models import format_cost_usd

from .roles import JUROR_PERSONAS

console = Console()

JUROR_STYLES = {"A": "cyan", "B": "magenta", "C": "green"}


def format_juror_name(juror: str) -> str:
    """Display name for a juror id.

    Example: "B" -> "Juror B (Devil's Advocate)"
    """
    persona = JUROR_PERSONAS.get(juror)
    return f"Juror {juror} ({persona.name})" if persona else f"Juror {juror}"


def truncate_for_display(text: str, limit: int = 500) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class UsageTotals:
    """Running token and cost totals across usage events."""

    def __init__(self) -> None:
        self.input_tokens = 0
        self.output_tokens = 0
        self.cost_usd = 0.0
        self.unpriced = 0

    def add(self, event: UsageEvent) -> None:
        self.input_tokens += event.data.input_tokens
        self.output_tokens += event.data.output_tokens
        if event.data.cost_usd is None:
            self.unpriced += 1
        else:
            self.cost_usd += event.data.cost_usd


def render_event(event: DebateEvent, totals: UsageTotals, show_deltas: bool = False) -> None:
    """Print one debate event.

    Juror deltas are hidden by default since positions_complete carries
    the same text in full.

    Args:
        event: Event to render
        totals: Usage accumulator, updated from usage events
        show_deltas: Print juror_delta fragments as they arrive
    """
    if isinstance(event, PhaseEvent):
        console.rule(f"[bold]{event.phase.value.title()}[/bold]")

    elif isinstance(event, (BaselineFairEvent, BaselineMiniEvent)):
        label = "Baseline" if isinstance(event, BaselineFairEvent) else "Baseline (alternate model)"
        console.print(
            Panel(
                Text(f"{event.data.summary}\n\n{truncate_for_display(event.data.reasoning)}"),
                title=f"{label}: {event.data.stance.value} ({event.data.confidence:.0%})",
                border_style="blue",
            )
        )

    elif isinstance(event, JurorDeltaEvent):
        if show_deltas:
            console.print(Text(event.delta, style=JUROR_STYLES[event.juror]), end="")

    elif isinstance(event, PositionsCompleteEvent):
        for juror, position in event.positions.items():
            console.print(
                Panel(
                    Text(f"{position.summary}\n\n{truncate_for_display(position.reasoning)}"),
                    title=f"{format_juror_name(juror)}: {position.stance.value} ({position.confidence:.0%})",
                    border_style=JUROR_STYLES[juror],
                )
            )

    elif isinstance(event, CoordinationEvent):
        data = event.data
        console.print(
            f"[dim]Agreement {data.agreement_score:.2f} | "
            f"confidence {data.average_confidence:.2f} | {escape(data.rationale)}[/dim]"
        )

    elif isinstance(event, CritiquesCompleteEvent):
        for juror, critiques in event.critiques.items():
            for critique in critiques:
                majors = sum(1 for c in critique.challenges if c.severity.value == "major")
                console.print(
                    f"[{JUROR_STYLES[juror]}]{format_juror_name(juror)}[/] -> "
                    f"{escape(critique.target_juror)}: {critique.overall_assessment.value}"
                    f" ({len(critique.challenges)} challenges, {majors} major)"
                )

    elif isinstance(event, RebuttalsCompleteEvent):
        for juror, rebuttal in (event.rebuttals or {}).items():
            console.print(
                f"[{JUROR_STYLES[juror]}]{format_juror_name(juror)}[/] "
                f"refined to {rebuttal.refined_stance.value}: {escape(rebuttal.refined_summary)}"
            )

    elif isinstance(event, RevisionsCompleteEvent):
        if event.revisions is None:
            console.print("[dim]Revision round skipped[/dim]")
        for juror, revision in (event.revisions or {}).items():
            changed = "changed" if revision.position_changed else "held"
            console.print(
                f"[{JUROR_STYLES[juror]}]{format_juror_name(juror)}[/] {changed}: "
                f"{revision.original_stance.value} -> {revision.revised_stance.value}"
            )

    elif isinstance(event, VerdictEvent):
        data = event.data
        body = Text(f"{data.verdict}\n\n{truncate_for_display(data.final_reasoning)}")
        console.print(
            Panel(
                body,
                title=(
                    f"Verdict (agreement {data.agreement_score:.2f}, "
                    f"confidence {data.confidence_score:.2f})"
                ),
                border_style="bold yellow",
            )
        )
        for action in data.next_actions:
            console.print(f"  - {escape(action)}")

    elif isinstance(event, EvaluationEvent):
        table = Table(title=f"Evaluation (winner: {event.data.winner})")
        table.add_column("Metric")
        table.add_column("Baseline", justify="right")
        table.add_column("Jury", justify="right")
        for metric in ("overall", "consistency", "specificity", "reasoning", "coverage"):
            table.add_row(
                metric,
                f"{getattr(event.data.baseline, metric):.1f}",
                f"{getattr(event.data.jury, metric):.1f}",
            )
        console.print(table)
        console.print(f"[dim]{escape(event.data.rationale)}[/dim]")

    elif isinstance(event, UsageEvent):
        totals.add(event)

    elif isinstance(event, ErrorEvent):
        console.print(f"[red]Error:[/red] {escape(event.message)}")


def print_usage_summary(totals: UsageTotals) -> None:
    """Print a compact token and cost summary line."""
    cost = format_cost_usd(totals.cost_usd)
    suffix = f" ({totals.unpriced} calls unpriced)" if totals.unpriced else ""
    console.print(
        f"[dim]Tokens: {totals.input_tokens:,} in / {totals.output_tokens:,} out | "
        f"cost {cost}{suffix}[/dim]"
    )
