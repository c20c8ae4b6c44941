"""
OpenAI moderation client.
"""

import logging
from typing import Any, Optional

from openai import AsyncOpenAI

from shared.config import Settings, get_settings

from .models import ModerationStatus, ModerationVerdict

logger = logging.getLogger(__name__)


class OpenAIModerationClient:
    """
    Moderation classifier backed by the OpenAI moderations endpoint.

    Never raises: transport or API errors come back as UNAVAILABLE.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self._settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            kwargs: dict[str, Any] = {"api_key": self._settings.openai_api_key}
            if self._settings.openai_base_url:
                kwargs["base_url"] = self._settings.openai_base_url
            self._client = AsyncOpenAI(**kwargs)
        return self._client

    async def classify(self, text: str, label: str = "input") -> ModerationVerdict:
        """
        Classify text with the configured moderation model.

        Args:
            text: Text to classify (trimmed, then truncated to moderation_max_chars)
            label: Where the text came from, for logging

        Returns:
            ModerationVerdict
        """
        trimmed = text.strip()
        if not trimmed:
            return ModerationVerdict(status=ModerationStatus.CLEAR)

        clamped = trimmed[: self._settings.moderation_max_chars]

        try:
            response = await self._get_client().moderations.create(
                model=self._settings.moderation_model,
                input=clamped,
            )
        except Exception as e:
            logger.warning(f"safety.moderation_failed label={label}: {e}")
            return ModerationVerdict(status=ModerationStatus.UNAVAILABLE)

        results = response.results or []
        flagged = any(result.flagged for result in results)
        categories = results[0].categories.model_dump() if results else None

        if flagged:
            logger.warning(f"safety.moderation_flagged label={label} categories={categories}")
            return ModerationVerdict(status=ModerationStatus.FLAGGED, categories=categories)

        return ModerationVerdict(status=ModerationStatus.CLEAR, categories=categories)
