"""
Safety module interface.

The guardrails depend on IModerationClient, not on the OpenAI client, so
tests and alternative classifiers can be swapped in.
"""

from typing import Protocol, runtime_checkable

from .models import ModerationVerdict


@runtime_checkable
class IModerationClient(Protocol):
    """
    Interface for an external content-moderation classifier.

    Implementations must never raise: any failure is reported as an
    UNAVAILABLE verdict so callers can fail closed.
    """

    async def classify(self, text: str, label: str = "input") -> ModerationVerdict:
        """
        Classify text.

        Args:
            text: Text to classify
            label: Where the text came from, for logging

        Returns:
            ModerationVerdict with status clear, flagged or unavailable
        """
        ...
