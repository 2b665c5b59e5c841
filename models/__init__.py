# models/__init__.py
from .base import Base
from .unit import Unit, UnitParticulars
from .customer import Customer
from .tenant import Tenant
from .employee import Employee, EmployeeRole, MANAGER_ROLES
from .complaint import (
     Complaint,
     ComplaintCategory,
     ComplaintSubCategory,
     ComplaintStatus,
     ComplaintPriority,
)
from .internal_complaint import InternalComplaint, InternalComplaintStatus
from .kyc import KycDocument, KycDocumentHistory
from .vehicle import Vehicle
from .leave import EmployeeLeave, LeaveStatus, LeaveType
from .notification import Notification
from .audit_log import AuditLog
from .property_history import PropertyHistory

__all__ = [
     "Base",
     "Unit",
     "UnitParticulars",
     "Customer",
     "Tenant",
     "Employee",
     "EmployeeRole",
     "MANAGER_ROLES",
     "Complaint",
     "ComplaintCategory",
     "ComplaintSubCategory",
     "ComplaintStatus",
     "ComplaintPriority",
     "InternalComplaint",
     "InternalComplaintStatus",
     "KycDocument",
     "KycDocumentHistory",
     "Vehicle",
     "EmployeeLeave",
     "LeaveStatus",
     "LeaveType",
     "Notification",
     "AuditLog",
     "PropertyHistory",
]
