# services/kyc_service.py
"""
KYC rules: which documents each entity type must provide, and how
completeness is computed from the *active* documents (kyc_documents).
"""
from datetime import datetime
from typing import Dict, Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models import Customer, KycDocument, KycDocumentHistory, Tenant

OWNER_DOC_TYPES: Dict[str, str] = {
     "aadhar": "Aadhar Card",
     "pan": "PAN Card",
     "photo": "Photograph",
     "sale_deed": "Sale Deed",
     "maintenance_agreement": "Maintenance Agreement",
}

TENANT_DOC_TYPES: Dict[str, str] = {
     "tenancy_contract": "Tenancy Contract",
     "aadhar": "Aadhar Card",
     "pan": "PAN Card",
     "photo": "Photograph",
     "police_verification": "Police Verification",
}

DOC_TYPES_BY_ENTITY = {
     "customer": OWNER_DOC_TYPES,
     "tenant": TENANT_DOC_TYPES,
}

ENTITY_MODELS = {
     "customer": Customer,
     "tenant": Tenant,
}


def is_valid_entity_type(entity_type: str) -> bool:
     return entity_type in DOC_TYPES_BY_ENTITY


def doc_type_labels(entity_type: str) -> Dict[str, str]:
     return DOC_TYPES_BY_ENTITY[entity_type]


def doc_label(entity_type: str, doc_type: str) -> str:
     return DOC_TYPES_BY_ENTITY.get(entity_type, {}).get(doc_type, doc_type)


def get_entity(db: Session, entity_type: str, entity_id: int):
     model = ENTITY_MODELS[entity_type]
     return db.query(model).filter(model.id == entity_id).first()


def completion(entity_type: str, uploaded: Iterable[str]) -> dict:
     """
     Completion report for an entity given the doc types it currently holds.
     Doc types outside the required set are ignored.
     """
     required = list(DOC_TYPES_BY_ENTITY[entity_type])
     uploaded_set = {t for t in uploaded if t in required}
     missing = [t for t in required if t not in uploaded_set]
     percentage = round(len(uploaded_set) / len(required) * 100) if required else 0
     return {
          "required_types": required,
          "uploaded_types": [t for t in required if t in uploaded_set],
          "missing_types": missing,
          "completion_percentage": percentage,
          "is_complete": not missing,
     }


def document_flags(entity_type: str, uploaded: Iterable[str]) -> Dict[str, bool]:
     uploaded_set = set(uploaded)
     return {t: t in uploaded_set for t in DOC_TYPES_BY_ENTITY[entity_type]}


def active_doc_types(db: Session, entity_type: str, entity_id: int) -> list:
     rows = (
          db.query(KycDocument.doc_type)
          .filter(KycDocument.entity_type == entity_type, KycDocument.entity_id == entity_id)
          .all()
     )
     return [row[0] for row in rows]


def active_doc_types_by_entity(db: Session, entity_type: str, entity_ids: Optional[Iterable[int]] = None) -> Dict[int, set]:
     """{entity_id: {doc_type, ...}} for many entities in one query."""
     query = db.query(KycDocument.entity_id, KycDocument.doc_type).filter(KycDocument.entity_type == entity_type)
     if entity_ids is not None:
          ids = list(entity_ids)
          if not ids:
               return {}
          query = query.filter(KycDocument.entity_id.in_(ids))
     result: Dict[int, set] = {}
     for entity_id, doc_type in query.all():
          result.setdefault(entity_id, set()).add(doc_type)
     return result


def next_version(db: Session, entity_type: str, entity_id: int, doc_type: str) -> int:
     current = (
          db.query(func.coalesce(func.max(KycDocumentHistory.version), 0))
          .filter(
               KycDocumentHistory.entity_type == entity_type,
               KycDocumentHistory.entity_id == entity_id,
               KycDocumentHistory.doc_type == doc_type,
          )
          .scalar()
     )
     return int(current or 0) + 1


def upload_document(
     db: Session,
     entity_type: str,
     entity_id: int,
     doc_type: str,
     file_data: str,
     file_name: Optional[str],
     remarks: Optional[str],
     employee_id: int,
) -> KycDocumentHistory:
     """
     Store a new version in the history and make it the active document.
     """
     version = next_version(db, entity_type, entity_id, doc_type)
     file_name = file_name or doc_type

     history = KycDocumentHistory(
          entity_type=entity_type,
          entity_id=entity_id,
          doc_type=doc_type,
          file_name=file_name,
          file_data=file_data,
          remarks=remarks,
          version=version,
          uploaded_by_employee_id=employee_id,
     )
     db.add(history)

     active = (
          db.query(KycDocument)
          .filter(
               KycDocument.entity_type == entity_type,
               KycDocument.entity_id == entity_id,
               KycDocument.doc_type == doc_type,
          )
          .first()
     )
     if active is None:
          active = KycDocument(entity_type=entity_type, entity_id=entity_id, doc_type=doc_type)
          db.add(active)
     active.file_name = file_name
     active.file_data = file_data
     active.version = version
     active.uploaded_by_employee_id = employee_id
     active.uploaded_at = datetime.utcnow()

     db.flush()
     return history


def complete_owner_count(db: Session) -> int:
     """Number of active owners holding every required owner document."""
     active_ids = [row[0] for row in db.query(Customer.id).filter(Customer.is_active.is_(True)).all()]
     docs = active_doc_types_by_entity(db, "customer", active_ids)
     required = set(OWNER_DOC_TYPES)
     return sum(1 for types in docs.values() if required <= types)
