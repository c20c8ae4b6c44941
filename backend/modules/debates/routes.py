"""
Debate API endpoints.

POST /api/debate validates, admits and screens the request, then streams
the debate as server-sent events.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse

from api.dependencies import get_debate_service
from modules.safety.exceptions import SafetyRejectionError
from shared.config import Settings, get_settings
from shared.exceptions import ConfigurationError, ValidationError
from shared.rate_limit import get_client_ip

from .exceptions import RateLimitExceededError
from .interfaces import IDebateService
from .models import DebateRequest

router = APIRouter()


async def event_generator(service: IDebateService, request: DebateRequest):
    """
    Generate SSE events for a debate.

    Yields events in the format:
        event: <event_type>
        data: <json_data>
    """
    async for event in service.stream_debate(request):
        yield {
            "event": event.type,
            "data": event.model_dump_json(),
        }


@router.post("")
async def run_debate(
    body: DebateRequest,
    request: Request,
    service: IDebateService = Depends(get_debate_service),
    settings: Settings = Depends(get_settings),
):
    """
    Run a debate and stream its events via SSE.

    Responses before the stream starts:
    - 400: invalid payload, or a query longer than max_query_length
    - 500: server has no OpenAI key
    - 429: rate limit exceeded (with X-RateLimit-* headers)
    - 403: question rejected by the safety check
    - 503: safety check unavailable

    Event types (from DebateEventType):
    - phase: a new phase started (baseline, positions, critique, rebuttal, revision, verdict)
    - baseline_fair / baseline_mini: single-shot baseline answers
    - juror_delta: fragment of a juror's round-one text
    - coordination: which optional rounds run
    - positions_complete / critiques_complete / rebuttals_complete / revisions_complete
    - verdict: chief justice's consensus verdict
    - evaluation: baseline vs jury scores (best effort)
    - usage: tokens and cost of one worker call
    - complete: the debate finished
    - error: the debate failed; no further events follow
    """
    if len(body.query) > settings.max_query_length:
        raise ValidationError(
            "Query is too long.",
            details={"max_length": settings.max_query_length},
        )

    try:
        service.ensure_configured()
    except ConfigurationError as e:
        return JSONResponse(status_code=500, content={"error": e.message})

    try:
        limit = service.admit(get_client_ip(request))
    except RateLimitExceededError as e:
        return JSONResponse(status_code=429, content={"error": e.message}, headers=e.headers)

    try:
        await service.screen_question(body.query)
    except SafetyRejectionError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})

    return EventSourceResponse(
        event_generator(service, body),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache, no-transform", **limit.headers()},
    )
