"""
Google Gemini client used by the content generator.
One GeminiClient per configured API key.
"""

import logging
from typing import Optional

import google.generativeai as genai

from utils.model_config import ModelConfig
from utils.exceptions import ModelProviderError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin async wrapper over google.generativeai.GenerativeModel."""

    def __init__(self, api_key: str, model_key: Optional[str] = None):
        config = ModelConfig.get_config(model_key)
        self.model_name = config["model"]

        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(
            self.model_name,
            generation_config=ModelConfig.generation_config(model_key),
        )
        logger.info(f"Gemini client initialized with model: {self.model_name}")

    async def generate_text(self, prompt: str) -> str:
        """
        Send one prompt and return the response text.

        Raises:
            ModelProviderError on any SDK, network or blocked-response failure.
            No retry is attempted.
        """
        try:
            response = await self.model.generate_content_async(prompt)
            # .text raises ValueError when the candidate was blocked
            return response.text
        except Exception as e:
            raise ModelProviderError(
                f"Gemini request failed: {e}",
                context={"model": self.model_name, "error_type": type(e).__name__},
            ) from e
