from .persistent_store import PersistentStore
from .history_manager import HistoryManager
from .tutor_service import TutorService
from .analysis_session import AnalysisSession
from .vocabulary_session import VocabularySession

__all__ = [
    "PersistentStore",
    "HistoryManager",
    "TutorService",
    "AnalysisSession",
    "VocabularySession",
]
