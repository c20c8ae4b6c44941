"""
Safety module.

Prompt-injection detection, external moderation and the guardrail
pipeline that screens questions and debate output.

Public API:
- SafetyGuardrails: Input admission and per-event redaction
- detect_prompt_injection: Rule-based injection scan
- OpenAIModerationClient: Moderation classifier (fails to UNAVAILABLE)
- SafetyRejectionError: Raised when a question is rejected
"""

from .exceptions import SafetyError, SafetyRejectionError
from .guardrails import (
    REDACTED_DELTA,
    REDACTED_TEXT,
    SafetyGuardrails,
    get_safety_guardrails,
    reset_safety_guardrails,
)
from .interfaces import IModerationClient
from .jailbreak import INJECTION_RULES, detect_prompt_injection
from .models import (
    InjectionDetection,
    ModerationStatus,
    ModerationVerdict,
    SafetyDecision,
    SafetyReason,
)
from .moderation import OpenAIModerationClient

__all__ = [
    "SafetyError",
    "SafetyRejectionError",
    "REDACTED_DELTA",
    "REDACTED_TEXT",
    "SafetyGuardrails",
    "get_safety_guardrails",
    "reset_safety_guardrails",
    "IModerationClient",
    "INJECTION_RULES",
    "detect_prompt_injection",
    "InjectionDetection",
    "ModerationStatus",
    "ModerationVerdict",
    "SafetyDecision",
    "SafetyReason",
    "OpenAIModerationClient",
]
