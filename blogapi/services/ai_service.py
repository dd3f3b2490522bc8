# blogapi/services/ai_service.py
import logging

import openai
from flask import Flask
from openai import OpenAI

from blogapi.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a writing assistant for a blogging platform. "
    "Write clear, engaging blog content in plain text for the request you are given."
)


class AIContentService:
    """
    OpenAI chat completions used to draft blog content from a short prompt.
    """

    def __init__(self):
        self.client = None
        self.model = None

    def init_app(self, app: Flask):
        self.model = app.config.get('OPENAI_MODEL', 'gpt-4o-mini')

        api_key = app.config.get('OPENAI_API_KEY')
        if not api_key:
            logger.warning("AIContentService: OPENAI_API_KEY is not set. Content generation is disabled.")
            return

        self.client = OpenAI(api_key=api_key)
        logger.info("AIContentService: OpenAI client initialized.")

    def generate_content(self, prompt: str) -> str:
        if not self.client:
            raise UpstreamServiceError("AI content generation is not configured", error_code="AI_NOT_CONFIGURED")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=500,
                temperature=0.7,
            )
        except openai.OpenAIError as e:
            logger.error(f"OpenAI content generation failed: {e}", exc_info=True)
            raise UpstreamServiceError("AI generation failed", error_code="AI_GENERATION_FAILED") from e

        content = response.choices[0].message.content
        if not content:
            raise UpstreamServiceError("AI generation returned no content", error_code="AI_GENERATION_FAILED")
        return content.strip()
