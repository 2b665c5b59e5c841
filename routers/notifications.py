# routers/notifications.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user
from models import Notification
from utils.serializers import model_to_dict

router = APIRouter(prefix="/api/notifications", tags=["notifications"])

LATEST_LIMIT = 50


def _mine(db: Session, user: dict):
     return db.query(Notification).filter(
          Notification.recipient_type == user["type"],
          Notification.recipient_id == user["id"],
     )


@router.get("", summary="Latest notifications and unread count")
def list_notifications(
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     notifications = (
          _mine(db, user)
          .order_by(Notification.created_at.desc(), Notification.id.desc())
          .limit(LATEST_LIMIT)
          .all()
     )
     unread = _mine(db, user).filter(Notification.is_read.is_(False)).count()
     return {
          "notifications": [model_to_dict(n) for n in notifications],
          "unread_count": unread,
     }


@router.post("/read-all", summary="Mark all notifications read")
def mark_all_read(
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     updated = (
          _mine(db, user)
          .filter(Notification.is_read.is_(False))
          .update({Notification.is_read: True}, synchronize_session=False)
     )
     db.commit()
     return {"message": "All notifications marked as read", "updated": updated}


@router.post("/{notification_id}/read", summary="Mark one notification read")
def mark_read(
     notification_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     notification = _mine(db, user).filter(Notification.id == notification_id).first()
     if not notification:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
     notification.is_read = True
     db.commit()
     return {"message": "Notification marked as read"}
