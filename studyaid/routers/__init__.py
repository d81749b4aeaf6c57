# Routers package
from . import analysis_router
from . import vocabulary_router
from . import history_router

__all__ = [
    "analysis_router",
    "vocabulary_router",
    "history_router",
]
