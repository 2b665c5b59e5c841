# services/notification_service.py
"""
Notification fan-out.

Every notification is stored as a row for the in-app bell. When
EMAIL_NOTIFICATIONS is on, the same title/message is mirrored to the
recipient's email address through Brevo. Emails are queued on the session
and only sent once that session commits; a rollback discards them.
"""
import logging
from typing import Iterable, Optional

from sqlalchemy import event
from sqlalchemy.orm import Session

import config
from models import Customer, Employee, Notification, MANAGER_ROLES
from utils.email import send_notification_email

logger = logging.getLogger("emperium.notifications")

PENDING_EMAILS = "pending_notification_emails"


def create_notification(
     db: Session,
     recipient_type: str,
     recipient_id: int,
     title: str,
     message: str,
     type: str = "info",
     complaint_id: Optional[int] = None,
) -> Notification:
     notification = Notification(
          recipient_type=recipient_type,
          recipient_id=recipient_id,
          title=title,
          message=message,
          type=type,
          complaint_id=complaint_id,
     )
     db.add(notification)

     if config.EMAIL_NOTIFICATIONS:
          _queue_email(db, recipient_type, recipient_id, title, message)

     return notification


def notify_employees(
     db: Session,
     employee_ids: Iterable[int],
     title: str,
     message: str,
     type: str = "info",
     complaint_id: Optional[int] = None,
) -> int:
     count = 0
     for employee_id in employee_ids:
          create_notification(db, "employee", employee_id, title, message, type, complaint_id)
          count += 1
     return count


def manager_ids(db: Session, roles=MANAGER_ROLES) -> list:
     rows = (
          db.query(Employee.id)
          .filter(Employee.role.in_(roles), Employee.is_active.is_(True))
          .order_by(Employee.id)
          .all()
     )
     return [row[0] for row in rows]


def notify_managers(
     db: Session,
     title: str,
     message: str,
     type: str = "info",
     complaint_id: Optional[int] = None,
) -> int:
     return notify_employees(db, manager_ids(db), title, message, type, complaint_id)


def _queue_email(db: Session, recipient_type: str, recipient_id: int, title: str, message: str) -> None:
     model = Customer if recipient_type == "customer" else Employee
     row = db.query(model.email).filter(model.id == recipient_id).first()
     if row is None or not row[0]:
          return
     db.info.setdefault(PENDING_EMAILS, []).append((recipient_type, recipient_id, row[0], title, message))


@event.listens_for(Session, "after_commit")
def _send_queued_emails(session: Session) -> None:
     for recipient_type, recipient_id, email, title, message in session.info.pop(PENDING_EMAILS, []):
          try:
               send_notification_email(email, title, message)
          except Exception:
               # The in-app notification is already stored; email is best effort
               logger.warning("Notification email to %s#%s failed", recipient_type, recipient_id, exc_info=True)


@event.listens_for(Session, "after_rollback")
def _drop_queued_emails(session: Session) -> None:
     session.info.pop(PENDING_EMAILS, None)
