"""Shared dependencies for the API routers."""
from datetime import datetime
from typing import Callable, Generator

from fastapi import Request
from sqlmodel import Session

from ..core.config import Settings
from ..db.engine import Database


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_session(request: Request) -> Generator[Session, None, None]:
    """
    Dependency for SQLModel session injection.
    Usage: session: Session = Depends(get_session)
    """
    with get_database(request).session() as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_clock(request: Request) -> Callable[[], datetime]:
    return request.app.state.clock
