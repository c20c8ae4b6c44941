"""
Tribunal - Jury-style multi-agent LLM debate from the terminal.

Puts a question to three juror roles, runs the critique / revision rounds
the coordination scorer calls for, and prints the chief justice's
verdict alongside a single-model baseline. Input and output go through
the same safety guardrails as the API.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from core.display import UsageTotals, console, print_usage_summary, render_event
from core.schemas import Domain
from modules.debates.models import ErrorEvent, ModelOption
from modules.debates.orchestrator import run_debate
from modules.safety.guardrails import get_safety_guardrails
from shared.config import get_settings
from shared.logging import configure_logging


async def main(
    question: str,
    domain: Domain,
    model: ModelOption,
    show_deltas: bool = False,
) -> int:
    """Main entry point.

    Args:
        question: The question to debate
        domain: Question domain
        model: Selected backing model
        show_deltas: Print juror text fragments as they stream

    Returns:
        Process exit code
    """
    settings = get_settings()
    if not settings.openai_api_key:
        console.print("[red]Error:[/red] OPENAI_API_KEY is not set.")
        return 1

    guardrails = get_safety_guardrails()
    decision = await guardrails.check_input_safety(question)
    if not decision.allowed:
        console.print(f"[red]Blocked ({decision.reason.value}):[/red] {decision.message}")
        return 2

    console.print(f"[bold]Question:[/bold] {question}")
    console.print(f"[dim]Domain: {domain.value} | Model: {model.value}[/dim]\n")

    totals = UsageTotals()
    failed = False
    async for event in run_debate(question, domain, model, settings=settings):
        safe_event = await guardrails.sanitize_debate_event(event)
        render_event(safe_event, totals, show_deltas=show_deltas)
        failed = failed or isinstance(safe_event, ErrorEvent)

    console.print()
    print_usage_summary(totals)
    if failed:
        return 1

    console.print("\n[bold green]Done![/bold green]")
    return 0


def cli() -> None:
    """Parse arguments and run one debate."""
    parser = argparse.ArgumentParser(
        description="Jury-style multi-agent LLM debate using LangGraph"
    )
    parser.add_argument(
        "question",
        nargs="?",
        help="Question to put to the jury",
    )
    parser.add_argument(
        "-f", "--file",
        type=Path,
        help="Path to a .txt or .md file containing the question",
    )
    parser.add_argument(
        "--domain", "-d",
        choices=[d.value for d in Domain],
        default=Domain.GENERAL.value,
        help="Question domain (default: general)",
    )
    parser.add_argument(
        "--model", "-m",
        choices=[m.value for m in ModelOption],
        default=ModelOption.GPT_5_2.value,
        help="Backing model (default: gpt-5.2)",
    )
    parser.add_argument(
        "--show-deltas",
        action="store_true",
        help="Print juror text as it streams",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level (default: WARNING)",
    )
    args = parser.parse_args()

    # Resolve question from file or argument
    if args.file:
        if not args.file.exists():
            console.print(f"[red]Error:[/red] File not found: {args.file}")
            sys.exit(1)
        if args.file.suffix.lower() not in (".txt", ".md"):
            console.print(f"[red]Error:[/red] File must be .txt or .md: {args.file}")
            sys.exit(1)
        question = args.file.read_text().strip()
    elif args.question:
        question = args.question
    else:
        parser.error("Either a question or --file must be provided")

    max_length = get_settings().max_query_length
    if not question or len(question) > max_length:
        parser.error(f"Question must be 1-{max_length} characters")

    configure_logging(args.log_level)
    sys.exit(asyncio.run(main(question, Domain(args.domain), ModelOption(args.model), args.show_deltas)))


if __name__ == "__main__":
    cli()
