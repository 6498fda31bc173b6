# school_admin/main.py
from dotenv import load_dotenv

# Cargar variables de entorno desde .env ANTES de cualquier otra cosa
load_dotenv()

import logging
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.audit import close_audit_log, configure_audit_log
from .core.config import Settings, get_settings
from .db.engine import Database

# Importaciones de API Routers
from .api import health
from .api.attendance import main as attendance_main_api
from .api.inventory import main as inventory_main_api
from .api.payments import main as payments_main_api
from .api.students import main as students_main_api

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    """
    Build the application. The database handle is created on startup and
    disposed on shutdown; `clock` drives receipt year/month (datetime.now).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Administración Escolar", version="1.0.0")
    app.state.settings = settings
    app.state.clock = clock or datetime.now

    # --- Database lifecycle ---
    @app.on_event("startup")
    def on_startup():
        """Connect to the database and initialize tables"""
        db = Database(settings.resolved_database_url)
        db.create_db_and_tables()
        app.state.db = db
        configure_audit_log(settings.audit_log_file)
        logger.info(f"Aplicación iniciada (entorno: {settings.app_env}).")

    @app.on_event("shutdown")
    def on_shutdown():
        db = getattr(app.state, "db", None)
        if db is not None:
            db.dispose()
        close_audit_log()

    # ============================================================================
    # --- CONFIGURACIÓN CORS ---
    # ============================================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ============================================================================
    # --- CABECERAS DE SEGURIDAD HTTP ---
    # ============================================================================
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    # ============================================================================
    # --- GLOBAL EXCEPTION HANDLERS ---
    # ============================================================================
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields = [
            ".".join(str(part) for part in error["loc"] if part != "body")
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"error": "Datos inválidos", "fields": fields},
        )

    # ============================================================================
    # --- ROUTERS INCLUSION ---
    # ============================================================================
    app.include_router(health.router)
    app.include_router(payments_main_api.router, prefix="/api", tags=["Pagos"])
    app.include_router(students_main_api.router, prefix="/api", tags=["Alumnos"])
    app.include_router(attendance_main_api.router, prefix="/api", tags=["Asistencias"])
    app.include_router(inventory_main_api.router, prefix="/api", tags=["Inventario"])

    return app


app = create_app()
