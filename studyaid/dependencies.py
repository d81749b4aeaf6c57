from dataclasses import dataclass
from fastapi import HTTPException, Request

from .application.ports.ai_provider import AIProvider
from .application.ports.storage_repo import KeyValueStorage
from .application.services import (
    AnalysisSession,
    HistoryManager,
    PersistentStore,
    TutorService,
    VocabularySession,
)
from .core.config import Settings


@dataclass
class AppServices:
    """Everything the routers share, built once per application."""
    history: HistoryManager
    analysis: AnalysisSession
    vocabulary: VocabularySession


def build_services(config: Settings, ai_provider: AIProvider, storage: KeyValueStorage) -> AppServices:
    history = HistoryManager(PersistentStore(storage, config.HISTORY_STORAGE_KEY))
    history.load()
    tutor = TutorService(ai_provider=ai_provider)
    return AppServices(
        history=history,
        analysis=AnalysisSession(tutor, history),
        vocabulary=VocabularySession(tutor),
    )


def get_services(request: Request) -> AppServices:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="Service is starting up")
    return services


def get_history(request: Request) -> HistoryManager:
    return get_services(request).history


def get_analysis_session(request: Request) -> AnalysisSession:
    return get_services(request).analysis


def get_vocabulary_session(request: Request) -> VocabularySession:
    return get_services(request).vocabulary
