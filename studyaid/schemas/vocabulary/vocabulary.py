# studyaid/schemas/vocabulary/vocabulary.py
from pydantic import BaseModel, Field, StrictStr
from typing import List, Optional

from ..common.common import CamelModel, SessionStatus


class VocabularyEntry(BaseModel):
    word: StrictStr
    pronunciation: StrictStr = Field(..., description="IPA pronunciation")
    definition: StrictStr = Field(..., description="Concise Chinese definition")
    example: StrictStr = Field(..., description="English example sentence using the word")


class VocabularyResult(BaseModel):
    topic: StrictStr
    words: List[VocabularyEntry]


class VocabularyRequest(BaseModel):
    topic: str = Field("", max_length=200)


class VocabularySessionView(CamelModel):
    status: SessionStatus
    topic: str
    result: Optional[VocabularyResult] = None
    error: Optional[str] = None
    revealed: List[int] = Field(default_factory=list)
    all_revealed: bool = Field(False, alias="allRevealed")
