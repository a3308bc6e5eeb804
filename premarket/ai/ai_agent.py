"""Report synthesis through an OpenAI-compatible chat completion endpoint."""

import logging
from typing import Optional

from openai import OpenAI

from ..config import LLMSettings
from ..errors import SynthesisError

logger = logging.getLogger(__name__)


class AIAgent:
    """Turns the structured prompt into narrative report text."""

    def __init__(self, settings: LLMSettings, client: Optional[OpenAI] = None):
        self.settings = settings
        self.model = settings.model
        if client is not None:
            self.client = client
        else:
            kwargs = {"api_key": settings.api_key}
            if settings.base_url:
                kwargs["base_url"] = settings.base_url
            self.client = OpenAI(**kwargs)
        logger.info(f"AIAgent initialized using {self.model}")

    def synthesize(self, prompt: str) -> str:
        """Send one prompt and return the response text.

        Raises:
            SynthesisError: The API call failed or produced no text.
        """
        logger.info("Generating AI analysis...")
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_tokens,
                stream=False,
            )
        except Exception as exc:
            raise SynthesisError(f"AI API call failed: {exc}") from exc

        text = self._extract_text(completion)
        if not text:
            raise SynthesisError("AI API returned an empty response")
        return text

    @staticmethod
    def _extract_text(completion) -> str:
        choices = getattr(completion, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None) or ""
        return content.strip()
