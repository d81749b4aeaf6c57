import asyncio
import threading

import pytest

from studyaid.application.services.analysis_session import ANALYSIS_FAILED_MESSAGE, AnalysisSession
from studyaid.application.services.history_manager import HistoryManager
from studyaid.application.services.persistent_store import PersistentStore
from studyaid.exceptions import CollaboratorUnavailableError, ResponseDecodeError, SessionBusyError
from studyaid.infrastructure.storage.memory_storage import InMemoryStorage
from studyaid.schemas.analysis.analysis import AnalysisRecord, AnalysisResult, PracticeQuestion, Subject
from studyaid.schemas.common.common import SessionStatus


def make_result(concept: str = "一元二次方程") -> AnalysisResult:
    return AnalysisResult(
        diagnosis="判别式算错",
        core_concept=concept,
        steps=["写出判别式", "代入", "求根"],
        practice_question=PracticeQuestion(question="x²-5x+6=0", answer="x=2或3", explanation="因式分解"),
    )


class FakeTutor:
    def __init__(self, result=None, error=None):
        self.result = result or make_result()
        self.error = error
        self.calls = []

    def analyze_problem(self, text, subject, image=None):
        self.calls.append((text, subject, image))
        if self.error:
            raise self.error
        return self.result


class BlockingTutor(FakeTutor):
    """Holds the call open until released, to observe the REQUESTING state."""

    def __init__(self):
        super().__init__()
        self.release = threading.Event()

    def analyze_problem(self, text, subject, image=None):
        self.release.wait(5)
        return super().analyze_problem(text, subject, image)


def make_session(tutor=None, now=1_700_000_000.0):
    history = HistoryManager(PersistentStore(InMemoryStorage(), "study-app-history"))
    return AnalysisSession(tutor or FakeTutor(), history, clock=lambda: now), history


def test_initial_state_is_idle():
    session, _ = make_session()
    view = session.snapshot()
    assert view.status == SessionStatus.IDLE
    assert view.result is None


@pytest.mark.asyncio
async def test_empty_submission_is_rejected_without_state_change():
    tutor = FakeTutor()
    session, history = make_session(tutor)
    assert await session.submit("", Subject.MATH, None) is False
    assert await session.submit("", Subject.PHYSICS, "") is False
    assert session.status == SessionStatus.IDLE
    assert session.subject == Subject.MATH
    assert tutor.calls == []
    assert len(history) == 0


@pytest.mark.asyncio
async def test_empty_submission_after_success_keeps_result():
    session, _ = make_session()
    await session.submit("x²-5x+6=0 的根", Subject.MATH)
    before = session.snapshot()
    assert await session.submit("", Subject.ENGLISH) is False
    assert session.snapshot() == before


@pytest.mark.asyncio
async def test_success_exposes_result_and_prepends_history():
    session, history = make_session()
    assert await session.submit("x²-5x+6=0 的根", Subject.MATH) is True

    assert session.status == SessionStatus.SUCCEEDED
    assert session.result.core_concept == "一元二次方程"
    record = history.records[0]
    assert record.id == session.record_id == "1700000000000"
    assert record.timestamp == 1700000000000
    assert record.subject == Subject.MATH
    assert record.original_problem == "x²-5x+6=0 的根"
    assert record.original_image is None
    assert record.result == session.result


@pytest.mark.asyncio
async def test_image_only_submission_is_accepted():
    tutor = FakeTutor()
    session, history = make_session(tutor)
    assert await session.submit("", Subject.CHEMISTRY, "data:image/png;base64,AAAA") is True
    assert tutor.calls == [("", Subject.CHEMISTRY, "data:image/png;base64,AAAA")]
    assert history.records[0].original_image == "data:image/png;base64,AAAA"


@pytest.mark.asyncio
async def test_two_successes_in_same_millisecond_get_distinct_ids():
    session, history = make_session()
    await session.submit("a", Subject.MATH)
    await session.submit("b", Subject.MATH)
    assert [r.original_problem for r in history.records] == ["b", "a"]
    assert len({r.id for r in history.records}) == 2


@pytest.mark.asyncio
async def test_transport_error_fails_without_touching_history():
    session, history = make_session(FakeTutor(error=CollaboratorUnavailableError("timeout")))
    assert await session.submit("q", Subject.BIOLOGY) is True
    assert session.status == SessionStatus.FAILED
    assert session.error == ANALYSIS_FAILED_MESSAGE
    assert session.result is None
    assert len(history) == 0


@pytest.mark.asyncio
async def test_response_missing_practice_question_fails():
    session, history = make_session(FakeTutor(error=ResponseDecodeError("practiceQuestion missing")))
    await session.submit("q", Subject.MATH)
    assert session.status == SessionStatus.FAILED
    assert len(history) == 0


@pytest.mark.asyncio
async def test_unexpected_error_marks_session_failed_and_propagates():
    session, _ = make_session(FakeTutor(error=RuntimeError("bug")))
    with pytest.raises(RuntimeError):
        await session.submit("q", Subject.MATH)
    assert session.status == SessionStatus.FAILED


@pytest.mark.asyncio
async def test_resubmission_after_failure_can_succeed():
    tutor = FakeTutor(error=CollaboratorUnavailableError("down"))
    session, history = make_session(tutor)
    await session.submit("q", Subject.MATH)
    tutor.error = None
    await session.submit("q", Subject.MATH)
    assert session.status == SessionStatus.SUCCEEDED
    assert session.error is None
    assert len(history) == 1


@pytest.mark.asyncio
async def test_second_submit_while_requesting_is_refused():
    tutor = BlockingTutor()
    session, history = make_session(tutor)

    first = asyncio.ensure_future(session.submit("q1", Subject.MATH))
    for _ in range(100):
        if session.busy:
            break
        await asyncio.sleep(0.01)
    assert session.status == SessionStatus.REQUESTING

    with pytest.raises(SessionBusyError):
        await session.submit("q2", Subject.MATH)
    with pytest.raises(SessionBusyError):
        session.load_record(AnalysisRecord(id="1", timestamp=1, subject=Subject.MATH, result=make_result()))

    tutor.release.set()
    assert await first is True
    assert session.status == SessionStatus.SUCCEEDED
    assert [c[0] for c in tutor.calls] == ["q1"]
    assert len(history) == 1


def test_load_record_replays_without_calling_tutor():
    tutor = FakeTutor()
    session, _ = make_session(tutor)
    record = AnalysisRecord(
        id="42",
        timestamp=42,
        subject=Subject.ENGLISH,
        original_problem="定语从句",
        original_image="data:image/jpeg;base64,AAAA",
        result=make_result("定语从句"),
    )
    session.load_record(record)
    assert session.status == SessionStatus.SUCCEEDED
    assert session.subject == Subject.ENGLISH
    assert session.text == "定语从句"
    assert session.image == "data:image/jpeg;base64,AAAA"
    assert session.result.core_concept == "定语从句"
    assert session.record_id == "42"
    assert tutor.calls == []


@pytest.mark.asyncio
async def test_answer_reveal_toggles_and_resets_on_new_result():
    session, _ = make_session()
    assert session.toggle_answer() is False
    await session.submit("q", Subject.MATH)
    assert session.toggle_answer() is True
    assert session.toggle_answer() is False
    session.toggle_answer()
    await session.submit("q again", Subject.MATH)
    assert session.answer_revealed is False


@pytest.mark.asyncio
async def test_whitespace_only_text_is_still_sent():
    tutor = FakeTutor()
    session, history = make_session(tutor)
    assert await session.submit("   ", Subject.PHYSICS) is True
    assert len(tutor.calls) == 1
    assert history.records[0].original_problem == "   "
