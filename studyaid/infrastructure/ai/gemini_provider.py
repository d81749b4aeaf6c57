import logging
from typing import Any, Dict, Optional

import google.generativeai as genai

from ...core.config import settings
from ...application.ports.ai_provider import AIProvider

logger = logging.getLogger(__name__)


def _extract_text_from_gemini_result(result) -> str:
    """Safely extract text from different Gemini result shapes."""
    try:
        text = result.text
        if text:
            return text
    except ValueError:
        # .text raises when the candidate was blocked or has no parts
        pass
    candidates = getattr(result, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        return "".join(getattr(p, "text", "") for p in parts)
    return ""


class GeminiProvider(AIProvider):
    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None) -> None:
        api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        if not api_key:
            logger.warning("GEMINI_API_KEY not configured; AI requests will fail")
        genai.configure(api_key=api_key)
        self.model_name = model_name or settings.GEMINI_MODEL

    def generate_json(
        self,
        prompt: str,
        response_schema: Dict[str, Any],
        image_bytes: Optional[bytes] = None,
        mime_type: Optional[str] = None,
        system_instruction: Optional[str] = None,
    ) -> str:
        model = genai.GenerativeModel(self.model_name, system_instruction=system_instruction)
        parts: list = [prompt]
        if image_bytes:
            parts.append({"mime_type": mime_type or "image/jpeg", "data": image_bytes})

        result = model.generate_content(
            parts,
            generation_config=genai.GenerationConfig(
                response_mime_type="application/json",
                response_schema=response_schema,
            ),
        )
        return _extract_text_from_gemini_result(result)
