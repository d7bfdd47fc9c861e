import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal_backend.api.admin import admin_router
from portal_backend.api.auth import auth_router
from portal_backend.api.dashboard import dashboard_router
from portal_backend.api.exams import exams_router
from portal_backend.api.exceptions import register_exception_handlers
from portal_backend.api.profile import profile_router
from portal_backend.api.programs import program_router
from portal_backend.api.receipts import receipt_router
from portal_backend.api.staff import staff_router
from portal_backend.api.student import student_router
from portal_backend.api.students import student_admin_router
from portal_backend.database import build_engine, build_session_factory
from portal_backend.model import Base
from portal_backend.settings import PortalSettings, settings as default_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def create_app(settings: Optional[PortalSettings] = None) -> FastAPI:
    """
    Build the portal API. The engine and session factory are created once
    here and handed to handlers through ``app.state``.
    """
    settings = settings or default_settings

    logging.basicConfig(level=settings.LOG_LEVEL, format=LOG_FORMAT)

    engine = build_engine(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.AUTO_CREATE_SCHEMA:
            Base.metadata.create_all(bind=engine)
            logger.info("Database schema ensured")
        yield
        engine.dispose()

    app = FastAPI(title="Institute Portal API", lifespan=lifespan)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(profile_router, prefix="/profile", tags=["profile"])
    app.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
    app.include_router(admin_router, prefix="/admin", tags=["admin"])
    app.include_router(staff_router, prefix="/admin/staff", tags=["admin", "staff"])
    app.include_router(student_admin_router, prefix="/admin/students", tags=["admin", "students"])
    app.include_router(receipt_router, prefix="/admin/receipts", tags=["admin", "receipts"])
    app.include_router(exams_router, prefix="/exams", tags=["exams"])
    app.include_router(student_router, prefix="/student", tags=["student"])
    app.include_router(program_router, prefix="/programs", tags=["programs"])

    return app
