# studyaid/schemas/analysis/analysis.py
from pydantic import Field, StrictStr, field_validator
from typing import Dict, List, Optional
from enum import Enum

from ...media_utils import decode_image_payload
from ..common.common import CamelModel, SessionStatus

# 9999-12-31T23:59:59.999Z, the last instant datetime can represent
MAX_TIMESTAMP_MS = 253_402_300_799_999


class Subject(str, Enum):
    MATH = "MATH"
    PHYSICS = "PHYSICS"
    CHEMISTRY = "CHEMISTRY"
    BIOLOGY = "BIOLOGY"
    ENGLISH = "ENGLISH"

    @property
    def label(self) -> str:
        return SUBJECT_LABELS[self]


SUBJECT_LABELS: Dict[Subject, str] = {
    Subject.MATH: "数学",
    Subject.PHYSICS: "物理",
    Subject.CHEMISTRY: "化学",
    Subject.BIOLOGY: "生物",
    Subject.ENGLISH: "英语",
}


class PracticeQuestion(CamelModel):
    question: StrictStr = Field(..., description="A new, similar problem for practice.")
    answer: StrictStr = Field(..., description="The final answer to the practice problem.")
    explanation: StrictStr = Field(..., description="Brief explanation of the practice problem.")


class AnalysisResult(CamelModel):
    diagnosis: StrictStr = Field(..., alias="mistakeDiagnosis")
    core_concept: StrictStr = Field(..., alias="coreConcept")
    steps: List[StrictStr] = Field(..., alias="stepByStepSolution")
    practice_question: PracticeQuestion = Field(..., alias="practiceQuestion")


class AnalysisRecord(CamelModel):
    id: StrictStr
    timestamp: int = Field(..., ge=0, le=MAX_TIMESTAMP_MS, description="Creation time in epoch milliseconds")
    subject: Subject
    original_problem: str = Field("", alias="originalProblem")
    original_image: Optional[str] = Field(None, alias="originalImage")
    result: AnalysisResult


class AnalyzeRequest(CamelModel):
    text: str = Field("", max_length=20000)
    subject: Subject = Subject.MATH
    image: Optional[str] = Field(None, description="Data URL or bare base64 image")

    @field_validator("image")
    @classmethod
    def _check_image(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        decode_image_payload(value)
        return value


class AnalysisSessionView(CamelModel):
    status: SessionStatus
    subject: Subject
    text: str
    image: Optional[str] = None
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None
    answer_revealed: bool = Field(False, alias="answerRevealed")
    record_id: Optional[str] = Field(None, alias="recordId")
