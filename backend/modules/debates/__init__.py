"""
Debates module.

Handles debate requests, orchestration, and streaming.

Public API:
- IDebateService: Interface for debate operations
- DebateRequest: Request to run a debate
- DebateEvent: Discriminated union of streamed events
- run_debate: Orchestrator entry point (modules.debates.orchestrator)
"""

from .models import (
    DEFAULT_MODEL,
    DebateEvent,
    DebateEventType,
    DebatePhase,
    DebateRequest,
    ModelOption,
    SampleQuestion,
    SamplesResponse,
    get_alternate_model,
    parse_debate_event,
)
from .exceptions import (
    DebateError,
    DebateNotConfiguredError,
    RateLimitExceededError,
    WorkerFailureError,
)

__all__ = [
    # Models
    "DEFAULT_MODEL",
    "DebateEvent",
    "DebateEventType",
    "DebatePhase",
    "DebateRequest",
    "ModelOption",
    "SampleQuestion",
    "SamplesResponse",
    "get_alternate_model",
    "parse_debate_event",
    # Exceptions
    "DebateError",
    "DebateNotConfiguredError",
    "RateLimitExceededError",
    "WorkerFailureError",
]
