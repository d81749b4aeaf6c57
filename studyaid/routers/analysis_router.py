from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..application.services.analysis_session import AnalysisSession
from ..dependencies import get_analysis_session
from ..exceptions import SessionBusyError, create_success_response
from ..schemas.analysis.analysis import AnalyzeRequest, Subject
from ..schemas.common.common import ErrorResponse, SessionStatus

router = APIRouter(prefix="/analysis", tags=["Analysis"])


class SubjectSelection(BaseModel):
    subject: Subject


def _view(session: AnalysisSession) -> dict:
    return session.snapshot().model_dump(mode="json", by_alias=True)


@router.get("")
async def get_analysis(session: AnalysisSession = Depends(get_analysis_session)):
    return create_success_response(_view(session))


@router.post("", responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 502: {"model": ErrorResponse}})
async def analyze_question(payload: AnalyzeRequest, session: AnalysisSession = Depends(get_analysis_session)):
    """
    Diagnose a wrong answer. The question may be typed, photographed, or both.
    On success the result is returned and stored at the top of the history.
    """
    try:
        accepted = await session.submit(payload.text, payload.subject, payload.image)
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not accepted:
        raise HTTPException(status_code=400, detail="Question text or image is required")

    view = _view(session)
    if session.status == SessionStatus.FAILED:
        return JSONResponse(status_code=502, content={"success": False, "data": view, "error": session.error})
    return create_success_response(view)


@router.put("/subject")
async def select_subject(selection: SubjectSelection, session: AnalysisSession = Depends(get_analysis_session)):
    session.select_subject(selection.subject)
    return create_success_response(_view(session))


@router.post("/answer/toggle")
async def toggle_practice_answer(session: AnalysisSession = Depends(get_analysis_session)):
    if session.result is None:
        raise HTTPException(status_code=404, detail="No analysis result to reveal")
    session.toggle_answer()
    return create_success_response(_view(session))
