"""LangGraph state and graph definition for the jury debate.

The phase order is fixed; the only branch is the rebuttal round, which
runs only under deep deliberation. Nodes emit DebateEvent objects via
stream_mode="custom".

Use graph.astream(state, stream_mode="custom") in the orchestrator.
"""

from typing import Any, Optional, TypedDict

from langgraph.graph import END, StateGraph

from .schemas import (
    BaselineOutput,
    CoordinationDecision,
    Critique,
    DebateContext,
    Evaluation,
    Position,
    Rebuttal,
    RevisedPosition,
    Verdict,
)


class DebateState(TypedDict, total=False):
    """State managed across the debate graph execution.

    Inputs are set once by the orchestrator; each phase adds its outputs.
    """

    # Inputs
    context: DebateContext
    model: str  # selected backing model
    alternate_model: str  # backing model for baseline_mini
    worker_factory: Any  # (role, model, label) -> worker
    delta_chunk_size: int

    # Phase outputs
    baseline_fair: BaselineOutput
    baseline_mini: BaselineOutput
    juror_positions: dict[str, Position]
    coordination: CoordinationDecision
    critiques: dict[str, list[Critique]]
    rebuttals: Optional[dict[str, Rebuttal]]
    revisions: Optional[dict[str, RevisedPosition]]
    final_verdict: Verdict
    evaluation: Optional[Evaluation]


def route_after_critique(state: DebateState) -> str:
    """Send deep deliberation through the rebuttal round.

    Returns:
        "rebuttal" if coordination requested deep deliberation
        "revision" otherwise
    """
    if state["coordination"].deep_deliberation:
        return "rebuttal"
    return "revision"


def build_graph():
    """Build and return the compiled debate graph.

    Graph structure:
        baseline -> positions -> critique -> [rebuttal ->] revision
        revision -> verdict -> evaluate -> END

    Returns:
        Compiled StateGraph ready for execution
    """
    from .nodes import NODES

    graph = StateGraph(DebateState)

    for name, node in NODES.items():
        graph.add_node(name, node)

    graph.set_entry_point("baseline")

    graph.add_edge("baseline", "positions")
    graph.add_edge("positions", "critique")
    graph.add_conditional_edges(
        "critique",
        route_after_critique,
        {
            "rebuttal": "rebuttal",
            "revision": "revision",
        },
    )
    graph.add_edge("rebuttal", "revision")
    graph.add_edge("revision", "verdict")
    graph.add_edge("verdict", "evaluate")
    graph.add_edge("evaluate", END)

    return graph.compile()
