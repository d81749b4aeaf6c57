import logging
from typing import Optional, Set

from starlette.concurrency import run_in_threadpool

from .tutor_service import TutorService
from ...exceptions import CollaboratorError, SessionBusyError
from ...schemas.common.common import SessionStatus
from ...schemas.vocabulary.vocabulary import VocabularyResult, VocabularySessionView

logger = logging.getLogger(__name__)

VOCABULARY_FAILED_MESSAGE = "单词生成失败，请稍后重试。"


class VocabularySession:
    """Flashcard generation flow plus the set of flipped cards.

    Same lifecycle as the analysis session, guarded by a non-empty topic.
    Results are never written to history.
    """

    def __init__(self, tutor: TutorService):
        self.tutor = tutor
        self.status = SessionStatus.IDLE
        self.topic = ""
        self.result: Optional[VocabularyResult] = None
        self.error: Optional[str] = None
        self.revealed: Set[int] = set()

    @property
    def busy(self) -> bool:
        return self.status == SessionStatus.REQUESTING

    @property
    def card_count(self) -> int:
        return len(self.result.words) if self.result else 0

    async def submit(self, topic: str) -> bool:
        topic = topic or ""
        if not topic:
            return False
        if self.busy:
            raise SessionBusyError("Vocabulary generation is already in progress")

        self.status = SessionStatus.REQUESTING
        self.topic = topic
        self.result = None
        self.error = None
        self.revealed = set()

        try:
            result = await run_in_threadpool(self.tutor.generate_vocabulary, topic)
        except CollaboratorError as e:
            logger.error(f"Vocabulary generation failed for '{topic}': {e}")
            self.status = SessionStatus.FAILED
            self.error = VOCABULARY_FAILED_MESSAGE
            return True
        except Exception:
            logger.exception("Unexpected error during vocabulary generation")
            self.status = SessionStatus.FAILED
            self.error = VOCABULARY_FAILED_MESSAGE
            raise

        self.result = result
        self.revealed = set()
        self.status = SessionStatus.SUCCEEDED
        return True

    def toggle(self, index: int) -> bool:
        """Flip one card; returns whether it is now revealed."""
        if not 0 <= index < self.card_count:
            raise IndexError(f"No flashcard at index {index}")
        if index in self.revealed:
            self.revealed.discard(index)
            return False
        self.revealed.add(index)
        return True

    def toggle_all(self) -> bool:
        """Reveal every card unless all are already revealed, then hide all."""
        if self.result is None:
            return False
        if self.all_revealed:
            self.revealed = set()
            return False
        self.revealed = set(range(self.card_count))
        return True

    @property
    def all_revealed(self) -> bool:
        return self.result is not None and len(self.revealed) == self.card_count

    def snapshot(self) -> VocabularySessionView:
        return VocabularySessionView(
            status=self.status,
            topic=self.topic,
            result=self.result,
            error=self.error,
            revealed=sorted(self.revealed),
            all_revealed=self.all_revealed,
        )
