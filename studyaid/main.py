from contextlib import asynccontextmanager
from datetime import datetime
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load environment variables as early as possible
load_dotenv()

from .core.config import settings
from .dependencies import build_services
from .exceptions import create_success_response, http_exception_handler
from .middleware import ErrorHandlingMiddleware, LoggingMiddleware, RequestSizeLimitMiddleware
from .routers import analysis_router, history_router, vocabulary_router
from .schemas.analysis.analysis import SUBJECT_LABELS
from .schemas.common.common import SubjectOption

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Study Aid API...")
    # Tests and embedders may pre-build services on app.state
    if getattr(app.state, "services", None) is None:
        from .infrastructure.ai.gemini_provider import GeminiProvider
        from .infrastructure.storage import build_storage

        app.state.services = build_services(settings, GeminiProvider(), build_storage(settings))
    logger.info(f"History ready with {len(app.state.services.history)} record(s)")
    yield
    logger.info("Shutting down Study Aid API...")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url=("/docs" if settings.DOCS_ENABLED else None),
        redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
        openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None)
    )
    app.state.services = None

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestSizeLimitMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(analysis_router.router)
    app.include_router(vocabulary_router.router)
    app.include_router(history_router.router)

    @app.get("/health")
    def health_check():
        return {
            "status": "healthy" if app.state.services is not None else "starting",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "timestamp": datetime.utcnow().isoformat(),
        }

    @app.get("/subjects")
    def list_subjects():
        options = [SubjectOption(value=s.value, label=label) for s, label in SUBJECT_LABELS.items()]
        return create_success_response([o.model_dump() for o in options])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("studyaid.main:app", host=settings.HOST, port=settings.PORT)
