from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from ..application.services.vocabulary_session import VocabularySession
from ..dependencies import get_vocabulary_session
from ..exceptions import SessionBusyError, create_success_response
from ..schemas.common.common import ErrorResponse, SessionStatus
from ..schemas.vocabulary.vocabulary import VocabularyRequest

router = APIRouter(prefix="/vocabulary", tags=["Vocabulary"])


def _view(session: VocabularySession) -> dict:
    return session.snapshot().model_dump(mode="json", by_alias=True)


@router.get("")
async def get_vocabulary(session: VocabularySession = Depends(get_vocabulary_session)):
    return create_success_response(_view(session))


@router.post("", responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 502: {"model": ErrorResponse}})
async def generate_vocabulary(payload: VocabularyRequest, session: VocabularySession = Depends(get_vocabulary_session)):
    try:
        accepted = await session.submit(payload.topic)
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not accepted:
        raise HTTPException(status_code=400, detail="Topic is required")

    view = _view(session)
    if session.status == SessionStatus.FAILED:
        return JSONResponse(status_code=502, content={"success": False, "data": view, "error": session.error})
    return create_success_response(view)


@router.post("/cards/toggle")
async def toggle_all_cards(session: VocabularySession = Depends(get_vocabulary_session)):
    if session.result is None:
        raise HTTPException(status_code=404, detail="No flashcards generated yet")
    session.toggle_all()
    return create_success_response(_view(session))


@router.post("/cards/{index}/toggle")
async def toggle_card(index: int, session: VocabularySession = Depends(get_vocabulary_session)):
    try:
        session.toggle(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return create_success_response(_view(session))
