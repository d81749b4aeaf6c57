import logging
import time
from typing import Callable, Optional

from starlette.concurrency import run_in_threadpool

from .history_manager import HistoryManager
from .tutor_service import TutorService
from ...exceptions import CollaboratorError, SessionBusyError
from ...schemas.analysis.analysis import AnalysisRecord, AnalysisResult, AnalysisSessionView, Subject
from ...schemas.common.common import SessionStatus

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "分析失败，请稍后重试。可能网络不稳定或图片过大。"


class AnalysisSession:
    """Lifecycle of the question-analysis flow.

    IDLE -> REQUESTING -> SUCCEEDED | FAILED, and SUCCEEDED/FAILED ->
    REQUESTING on re-submission. Replaying a history record jumps straight to
    SUCCEEDED without touching the AI service. Only one request may be in
    flight; while REQUESTING, submit and replay are refused.
    """

    def __init__(self, tutor: TutorService, history: HistoryManager, clock: Callable[[], float] = time.time):
        self.tutor = tutor
        self.history = history
        self.clock = clock

        self.status = SessionStatus.IDLE
        self.subject = Subject.MATH
        self.text = ""
        self.image: Optional[str] = None
        self.result: Optional[AnalysisResult] = None
        self.error: Optional[str] = None
        self.answer_revealed = False
        self.record_id: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.status == SessionStatus.REQUESTING

    def select_subject(self, subject: Subject) -> None:
        self.subject = subject

    async def submit(self, text: str, subject: Subject, image: Optional[str] = None) -> bool:
        """Run one analysis. Returns False when there is nothing to analyze."""
        text = text or ""
        if not text and not image:
            return False
        if self.busy:
            raise SessionBusyError("An analysis is already in progress")

        # check-and-set happens before the first await
        self.status = SessionStatus.REQUESTING
        self.subject = subject
        self.text = text
        self.image = image or None
        self.result = None
        self.error = None
        self.answer_revealed = False
        self.record_id = None

        try:
            result = await run_in_threadpool(self.tutor.analyze_problem, text, subject, self.image)
        except CollaboratorError as e:
            logger.error(f"Analysis failed for {subject.value} question: {e}")
            self.status = SessionStatus.FAILED
            self.error = ANALYSIS_FAILED_MESSAGE
            return True
        except Exception:
            logger.exception("Unexpected error during analysis")
            self.status = SessionStatus.FAILED
            self.error = ANALYSIS_FAILED_MESSAGE
            raise

        now_ms = int(self.clock() * 1000)
        record = AnalysisRecord(
            id=self.history.new_record_id(now_ms),
            timestamp=now_ms,
            subject=subject,
            original_problem=text,
            original_image=self.image,
            result=result,
        )
        self.history.append(record)

        self.result = result
        self.record_id = record.id
        self.status = SessionStatus.SUCCEEDED
        logger.info(f"Analysis {record.id} stored ({subject.value}, concept: {result.core_concept})")
        return True

    def load_record(self, record: AnalysisRecord) -> None:
        if self.busy:
            raise SessionBusyError("Cannot open a history record while an analysis is in progress")
        self.subject = record.subject
        self.text = record.original_problem
        self.image = record.original_image or None
        self.result = record.result
        self.error = None
        self.answer_revealed = False
        self.record_id = record.id
        self.status = SessionStatus.SUCCEEDED

    def toggle_answer(self) -> bool:
        if self.result is None:
            return False
        self.answer_revealed = not self.answer_revealed
        return self.answer_revealed

    def snapshot(self) -> AnalysisSessionView:
        return AnalysisSessionView(
            status=self.status,
            subject=self.subject,
            text=self.text,
            image=self.image,
            result=self.result,
            error=self.error,
            answer_revealed=self.answer_revealed,
            record_id=self.record_id,
        )
