"""Health check endpoint."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from loot_engine.db.database import get_db

router = APIRouter()


@router.get("/health")
def health_check(request: Request, db: Session = Depends(get_db)) -> dict[str, str]:
    """Return application, database and definition data status."""
    data = "loaded" if hasattr(request.app.state, "data_manager") else "missing"
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ok", "database": "connected", "data": data}
    except SQLAlchemyError:
        return {"status": "error", "database": "disconnected", "data": data}
