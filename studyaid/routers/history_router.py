from fastapi import APIRouter, Depends, HTTPException
import logging

from ..application.services.analysis_session import AnalysisSession
from ..application.services.history_manager import HistoryManager
from ..dependencies import get_analysis_session, get_history
from ..exceptions import SessionBusyError, create_success_response
from ..schemas.history.history import HistoryItemSummary, HistoryListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/history", tags=["History"])


def _get_or_404(history: HistoryManager, record_id: str):
    record = history.get(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="History record not found")
    return record


@router.get("")
async def list_history(history: HistoryManager = Depends(get_history)):
    items = [HistoryItemSummary.from_record(r) for r in history.records]
    body = HistoryListResponse(total=len(items), items=items)
    return create_success_response(body.model_dump(mode="json", by_alias=True))


@router.get("/{record_id}")
async def get_history_record(record_id: str, history: HistoryManager = Depends(get_history)):
    record = _get_or_404(history, record_id)
    return create_success_response(record.model_dump(mode="json", by_alias=True))


@router.delete("/{record_id}")
async def delete_history_record(record_id: str, history: HistoryManager = Depends(get_history)):
    removed = history.remove(record_id)
    if removed:
        logger.info(f"Deleted history record {record_id}")
    return create_success_response({"removed": removed, "total": len(history)})


@router.delete("")
async def clear_history(history: HistoryManager = Depends(get_history)):
    history.clear()
    logger.info("History cleared")
    return create_success_response({"removed": True, "total": 0})


@router.post("/{record_id}/load")
async def load_history_record(
    record_id: str,
    history: HistoryManager = Depends(get_history),
    session: AnalysisSession = Depends(get_analysis_session),
):
    """Replay a stored diagnosis into the analysis view without calling the AI."""
    record = _get_or_404(history, record_id)
    try:
        session.load_record(record)
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return create_success_response(session.snapshot().model_dump(mode="json", by_alias=True))
