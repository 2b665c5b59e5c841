# routers/kyc.py
"""
KYC document routes for owners (entity_type "customer") and tenants.

Uploads append a version to kyc_document_history and replace the active
document in kyc_documents. Deleting only clears the active slot.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user, is_customer, require_employee, require_manager
from models import AuditLog, Customer, Employee, KycDocument, KycDocumentHistory, Tenant, Unit
from schemas.kyc import KycUpload
from services.audit_service import record_property_history, write_audit_log
from services.kyc_service import (
     active_doc_types_by_entity,
     completion,
     doc_label,
     doc_type_labels,
     document_flags,
     get_entity,
     is_valid_entity_type,
     upload_document,
)
from utils.serializers import model_to_dict, row_to_dict

router = APIRouter(prefix="/api/kyc", tags=["kyc"])


def _resolve_entity(db: Session, entity_type: str, entity_id: int):
     if not is_valid_entity_type(entity_type):
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="entity_type must be customer or tenant")
     entity = get_entity(db, entity_type, entity_id)
     if entity is None:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity_type.capitalize()} not found")
     return entity


def _ensure_can_read(user: dict, entity_type: str, entity) -> None:
     """Customers read their own KYC and that of the tenant in their unit."""
     if not is_customer(user):
          return
     if entity_type == "customer" and entity.id == user["id"]:
          return
     if entity_type == "tenant" and entity.unit_id == user.get("unit_id"):
          return
     raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only view your own KYC documents")


def _history_query(db: Session, entity_type: str, entity_id: int):
     return (
          db.query(KycDocumentHistory, Employee.name.label("uploaded_by_name"))
          .outerjoin(Employee, Employee.id == KycDocumentHistory.uploaded_by_employee_id)
          .filter(
               KycDocumentHistory.entity_type == entity_type,
               KycDocumentHistory.entity_id == entity_id,
          )
          .order_by(KycDocumentHistory.doc_type, KycDocumentHistory.version.desc())
     )


@router.get("/tracker/summary", summary="KYC completion for every active owner and tenant")
def tracker_summary(
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     owners = (
          db.query(Customer, Unit.unit_no.label("unit_no"))
          .join(Unit, Unit.id == Customer.unit_id)
          .filter(Customer.is_active.is_(True))
          .order_by(Unit.unit_no)
          .all()
     )
     tenants = (
          db.query(Tenant, Unit.unit_no.label("unit_no"))
          .join(Unit, Unit.id == Tenant.unit_id)
          .filter(Tenant.is_active.is_(True))
          .order_by(Unit.unit_no)
          .all()
     )
     owner_docs = active_doc_types_by_entity(db, "customer", [row[0].id for row in owners])
     tenant_docs = active_doc_types_by_entity(db, "tenant", [row[0].id for row in tenants])

     def _entry(entity_type, row, docs):
          entity, unit_no = row
          uploaded = docs.get(entity.id, set())
          report = completion(entity_type, uploaded)
          return {
               "entity_type": entity_type,
               "entity_id": entity.id,
               "name": entity.name,
               "unit_id": entity.unit_id,
               "unit_no": unit_no,
               "documents": document_flags(entity_type, uploaded),
               "completion_percentage": report["completion_percentage"],
               "is_complete": report["is_complete"],
          }

     owner_entries = [_entry("customer", row, owner_docs) for row in owners]
     tenant_entries = [_entry("tenant", row, tenant_docs) for row in tenants]
     return {
          "owners": owner_entries,
          "tenants": tenant_entries,
          "summary": {
               "total_owners": len(owner_entries),
               "complete_owners": sum(1 for e in owner_entries if e["is_complete"]),
               "total_tenants": len(tenant_entries),
               "complete_tenants": sum(1 for e in tenant_entries if e["is_complete"]),
          },
     }


@router.get("/history/{entity_type}/{entity_id}", summary="All KYC versions and KYC audit rows")
def kyc_history(
     entity_type: str,
     entity_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     _resolve_entity(db, entity_type, entity_id)
     versions = _history_query(db, entity_type, entity_id).all()
     audit = (
          db.query(AuditLog)
          .filter(
               AuditLog.entity_type == entity_type,
               AuditLog.entity_id == entity_id,
               AuditLog.action.like("kyc_%"),
          )
          .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
          .all()
     )
     return {
          "history": [
               {**row_to_dict(row), "doc_label": doc_label(entity_type, row[0].doc_type)}
               for row in versions
          ],
          "audit_logs": [model_to_dict(entry) for entry in audit],
     }


@router.get("/{entity_type}/{entity_id}", summary="Current KYC documents and completeness")
def get_kyc(
     entity_type: str,
     entity_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     entity = _resolve_entity(db, entity_type, entity_id)
     _ensure_can_read(user, entity_type, entity)

     documents = (
          db.query(KycDocument)
          .filter(KycDocument.entity_type == entity_type, KycDocument.entity_id == entity_id)
          .order_by(KycDocument.doc_type)
          .all()
     )
     history = _history_query(db, entity_type, entity_id).all()

     return {
          "entity_type": entity_type,
          "entity_id": entity_id,
          "name": entity.name,
          "documents": [
               model_to_dict(doc, doc_label=doc_label(entity_type, doc.doc_type))
               for doc in documents
          ],
          "history": [
               {**row_to_dict(row, exclude=("file_data",)), "doc_label": doc_label(entity_type, row[0].doc_type)}
               for row in history
          ],
          "doc_labels": doc_type_labels(entity_type),
          **completion(entity_type, [doc.doc_type for doc in documents]),
     }


@router.post("/{entity_type}/{entity_id}", status_code=status.HTTP_201_CREATED, summary="Upload a KYC document")
def upload_kyc(
     entity_type: str,
     entity_id: int,
     body: KycUpload,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     entity = _resolve_entity(db, entity_type, entity_id)
     if body.doc_type not in doc_type_labels(entity_type):
          raise HTTPException(
               status_code=status.HTTP_400_BAD_REQUEST,
               detail=f"Invalid doc_type for {entity_type}: {body.doc_type}",
          )

     version = upload_document(
          db, entity_type, entity_id, body.doc_type, body.file_data, body.file_name, body.remarks, user["id"],
     )
     label = doc_label(entity_type, body.doc_type)
     description = f"{label} v{version.version} uploaded for {entity.name}"
     write_audit_log(db, "kyc_uploaded", entity_type, entity_id, description, user)
     record_property_history(db, entity.unit_id, "kyc_update", description, user["id"])
     db.commit()

     return {
          "message": "Document uploaded successfully",
          "document": model_to_dict(version, exclude=("file_data",), doc_label=label),
     }


@router.delete("/{entity_type}/{entity_id}/{doc_type}", summary="Remove an active KYC document")
def delete_kyc(
     entity_type: str,
     entity_id: int,
     doc_type: str,
     db: Session = Depends(get_session),
     user: dict = Depends(require_manager),
):
     entity = _resolve_entity(db, entity_type, entity_id)
     document = (
          db.query(KycDocument)
          .filter(
               KycDocument.entity_type == entity_type,
               KycDocument.entity_id == entity_id,
               KycDocument.doc_type == doc_type,
          )
          .first()
     )
     if not document:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")

     db.delete(document)
     description = f"{doc_label(entity_type, doc_type)} removed for {entity.name}"
     write_audit_log(db, "kyc_deleted", entity_type, entity_id, description, user)
     record_property_history(db, entity.unit_id, "kyc_update", description, user["id"])
     db.commit()
     return {"message": "Document removed"}
