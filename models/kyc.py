# models/kyc.py
"""
KYC document models.

kyc_documents holds the *active* document per (entity_type, entity_id, doc_type).
kyc_document_history is append-only: every upload creates a new version row,
and removing an active document never touches the history.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint, func
from .base import Base


class KycDocument(Base):
     __tablename__ = "kyc_documents"
     __table_args__ = (
          UniqueConstraint("entity_type", "entity_id", "doc_type", name="uq_kyc_documents_entity_doc"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     entity_type = Column(String(20), nullable=False)  # customer, tenant
     entity_id = Column(Integer, nullable=False, index=True)
     doc_type = Column(String(50), nullable=False)
     file_name = Column(String(255), nullable=True)
     file_data = Column(Text, nullable=False)
     version = Column(Integer, default=1, nullable=False)
     uploaded_by_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
     uploaded_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<KycDocument({self.entity_type}#{self.entity_id}, doc_type='{self.doc_type}')>"


class KycDocumentHistory(Base):
     __tablename__ = "kyc_document_history"

     id = Column(Integer, primary_key=True, autoincrement=True)
     entity_type = Column(String(20), nullable=False)
     entity_id = Column(Integer, nullable=False, index=True)
     doc_type = Column(String(50), nullable=False)
     file_name = Column(String(255), nullable=True)
     file_data = Column(Text, nullable=False)
     remarks = Column(Text, nullable=True)
     version = Column(Integer, nullable=False)
     uploaded_by_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
     uploaded_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<KycDocumentHistory({self.entity_type}#{self.entity_id}, doc_type='{self.doc_type}', v{self.version})>"
