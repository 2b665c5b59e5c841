# routers/audit.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from dependencies import require_admin
from models import AuditLog
from utils.pagination import paginate
from utils.serializers import model_to_dict

router = APIRouter(prefix="/api/audit-logs", tags=["audit"])


@router.get("", summary="Browse the audit log (admin)")
def list_audit_logs(
     page: int = Query(1, ge=1),
     limit: int = Query(50, ge=1, le=500),
     entity_type: Optional[str] = Query(None),
     entity_id: Optional[int] = Query(None),
     action: Optional[str] = Query(None),
     db: Session = Depends(get_session),
     user: dict = Depends(require_admin),
):
     query = db.query(AuditLog)
     if entity_type:
          query = query.filter(AuditLog.entity_type == entity_type)
     if entity_id is not None:
          query = query.filter(AuditLog.entity_id == entity_id)
     if action:
          query = query.filter(AuditLog.action == action)

     rows, pagination = paginate(query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()), page, limit)
     return {"audit_logs": [model_to_dict(entry) for entry in rows], "pagination": pagination}
