"""
Safety module data models.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class InjectionDetection(BaseModel):
    """Result of the prompt-injection rule scan."""

    model_config = {"frozen": True}

    flagged: bool
    matches: list[str] = Field(default_factory=list, description="Ids of matching rules")


class ModerationStatus(str, Enum):
    """Outcome of a moderation call."""

    CLEAR = "clear"
    FLAGGED = "flagged"
    UNAVAILABLE = "unavailable"  # classifier could not be reached; treated as unsafe


class ModerationVerdict(BaseModel):
    """Moderation classifier result."""

    model_config = {"frozen": True}

    status: ModerationStatus
    categories: Optional[dict[str, Any]] = None

    @property
    def flagged(self) -> bool:
        return self.status == ModerationStatus.FLAGGED

    @property
    def unavailable(self) -> bool:
        return self.status == ModerationStatus.UNAVAILABLE


class SafetyReason(str, Enum):
    """Why a request or output was blocked."""

    PROMPT_INJECTION = "prompt_injection"
    UNSAFE_CONTENT = "unsafe_content"
    MODERATION_UNAVAILABLE = "moderation_unavailable"


class SafetyDecision(BaseModel):
    """Admission decision for an inbound question."""

    model_config = {"frozen": True}

    allowed: bool
    reason: Optional[SafetyReason] = None
    message: Optional[str] = None
