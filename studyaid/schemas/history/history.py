# studyaid/schemas/history/history.py
from datetime import datetime
from pydantic import Field
from typing import List

from ..analysis.analysis import AnalysisRecord, Subject
from ..common.common import CamelModel

IMAGE_ONLY_PLACEHOLDER = "（无文字描述，仅图片）"


def format_timestamp(timestamp_ms: int) -> str:
    """Short local time label, e.g. '10/19 14:05'. Empty when the stamp has
    no local-time representation on this platform."""
    try:
        moment = datetime.fromtimestamp(timestamp_ms / 1000)
    except (ValueError, OverflowError, OSError):
        return ""
    return f"{moment.month}/{moment.day} {moment:%H:%M}"


class HistoryItemSummary(CamelModel):
    id: str
    timestamp: int
    time_label: str = Field(..., alias="timeLabel")
    subject: Subject
    subject_label: str = Field(..., alias="subjectLabel")
    preview: str
    has_image: bool = Field(..., alias="hasImage")
    core_concept: str = Field(..., alias="coreConcept")

    @classmethod
    def from_record(cls, record: AnalysisRecord) -> "HistoryItemSummary":
        return cls(
            id=record.id,
            timestamp=record.timestamp,
            time_label=format_timestamp(record.timestamp),
            subject=record.subject,
            subject_label=record.subject.label,
            preview=record.original_problem or IMAGE_ONLY_PLACEHOLDER,
            has_image=bool(record.original_image),
            core_concept=record.result.core_concept,
        )


class HistoryListResponse(CamelModel):
    total: int
    items: List[HistoryItemSummary]
