from contextlib import asynccontextmanager
from typing import Optional
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api.v1.api import router as api_router
from .backend import Backend, build_backend
from .core.config import Settings, settings as default_settings
from .core.logging import setup_logging
from .services.registry import ManagerRegistry
from .services.session_gate import SessionGate

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, backend: Optional[Backend] = None) -> FastAPI:
    """
    Build the app. The backend is built from settings at startup unless one is
    passed in, which is how tests swap in fakes.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL, sql_echo=settings.SQL_ECHO)
        active = backend or await build_backend(settings)
        registry = ManagerRegistry(active)

        app.state.settings = settings
        app.state.backend = active
        app.state.registry = registry
        app.state.gate = SessionGate(active.auth, registry)
        logger.info("Started with %s backend", active.name)
        yield
        # Tear down mounted lists and release backend resources
        await registry.unmount_all()
        await active.aclose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Task list backed by a hosted table and identity provider",
        version="1.0.0",
        lifespan=lifespan
    )

    # CORS middleware so the browser frontend can send the session cookie
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/")
    def read_root():
        return {"message": settings.PROJECT_NAME}

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
