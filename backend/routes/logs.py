# backend/routes/logs.py
from datetime import date, datetime, time, timedelta
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from sqlalchemy import func, select

from database import Database, get_database
from models.log import Log

router = APIRouter(prefix="/logs", tags=["Logs"])


# --- SCHEMAS ---
class LogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    action: str
    resource: str
    status: str
    ts: Optional[datetime] = None
    meta: Optional[Any] = None


class LogPage(BaseModel):
    items: List[LogResponse]
    total: int
    page: int
    page_size: int


# --- ENDPOINT ---
@router.get("", response_model=LogPage)
def get_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Filter by action"),
    resource: Optional[str] = Query(None, description="Filter by resource"),
    status: Optional[str] = Query(None, description="Filter by status (SUCCESS/FAIL)"),
    date_from: Optional[date] = Query(None, description="From date (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="To date (YYYY-MM-DD), inclusive"),
    database: Database = Depends(get_database),
):
    query = select(Log)

    if action:
        query = query.where(Log.action.ilike(f"%{action}%"))
    if resource:
        query = query.where(Log.resource.ilike(f"%{resource}%"))
    if status:
        query = query.where(Log.status == status)
    if date_from:
        query = query.where(Log.ts >= datetime.combine(date_from, time.min))
    if date_to:
        # Whole end day included
        query = query.where(Log.ts < datetime.combine(date_to + timedelta(days=1), time.min))

    db = database.session()
    try:
        total = db.scalar(select(func.count()).select_from(query.subquery()))
        rows = db.scalars(
            query.order_by(Log.ts.desc(), Log.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()
        items = [LogResponse.model_validate(row) for row in rows]
    finally:
        db.close()

    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
    }
