import logging
from dataclasses import dataclass
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..ports.ai_provider import AIProvider
from .prompts import (
    ANALYSIS_RESPONSE_SCHEMA,
    ANALYSIS_SYSTEM_INSTRUCTION,
    VOCABULARY_RESPONSE_SCHEMA,
    build_analysis_prompt,
    build_vocabulary_prompt,
)
from ...exceptions import CollaboratorUnavailableError, ResponseDecodeError
from ...media_utils import decode_image_payload
from ...schemas.analysis.analysis import AnalysisResult, Subject
from ...schemas.vocabulary.vocabulary import VocabularyResult

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def extract_json_object(text: Optional[str]) -> str:
    """Return the outermost {...} span of a model reply."""
    if not text or not text.strip():
        raise ResponseDecodeError("No response from AI")
    json_start = text.find("{")
    json_end = text.rfind("}") + 1
    if json_start == -1 or json_end <= json_start:
        raise ResponseDecodeError("No JSON object found in AI response")
    return text[json_start:json_end]


def decode_response(text: Optional[str], model: Type[ModelT]) -> ModelT:
    payload = extract_json_object(text)
    try:
        return model.model_validate_json(payload)
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ResponseDecodeError(f"AI response failed {model.__name__} validation at {missing}") from e


@dataclass
class TutorService:
    ai_provider: AIProvider

    def analyze_problem(self, text: str, subject: Subject, image: Optional[str] = None) -> AnalysisResult:
        image_bytes = None
        mime_type = None
        if image:
            try:
                image_bytes, mime_type = decode_image_payload(image)
            except ValueError as e:
                raise ResponseDecodeError(f"Image payload rejected: {e}") from e

        prompt = build_analysis_prompt(text, subject)
        reply = self._call(
            "analysis",
            prompt,
            ANALYSIS_RESPONSE_SCHEMA,
            image_bytes=image_bytes,
            mime_type=mime_type,
            system_instruction=ANALYSIS_SYSTEM_INSTRUCTION,
        )
        return decode_response(reply, AnalysisResult)

    def generate_vocabulary(self, topic: str) -> VocabularyResult:
        reply = self._call("vocabulary", build_vocabulary_prompt(topic), VOCABULARY_RESPONSE_SCHEMA)
        result = decode_response(reply, VocabularyResult)
        if not 5 <= len(result.words) <= 8:
            logger.info(f"Vocabulary for '{topic}' returned {len(result.words)} words (target 5-8)")
        return result

    def _call(self, kind: str, prompt: str, schema: dict, **kwargs) -> str:
        try:
            return self.ai_provider.generate_json(prompt, schema, **kwargs)
        except Exception as e:
            logger.error(f"Gemini {kind} request failed: {e}")
            raise CollaboratorUnavailableError(str(e)) from e
