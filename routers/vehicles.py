# routers/vehicles.py
"""
Resident vehicle registration.

Staff can manage any unit's vehicles; customers only their own unit's.
Vehicle numbers are unique among active vehicles.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user, is_customer
from models import Customer, Employee, Tenant, Unit, Vehicle
from schemas.vehicle import VehicleCreate, VehicleUpdate
from services.audit_service import write_audit_log
from utils.serializers import model_to_dict, row_to_dict

router = APIRouter(prefix="/api/vehicles", tags=["vehicles"])


def _vehicle_query(db: Session):
     return (
          db.query(
               Vehicle,
               Unit.unit_no.label("unit_no"),
               Customer.name.label("customer_name"),
               Tenant.name.label("tenant_name"),
               Employee.name.label("registered_by_name"),
          )
          .join(Unit, Unit.id == Vehicle.unit_id)
          .outerjoin(Customer, Customer.id == Vehicle.customer_id)
          .outerjoin(Tenant, Tenant.id == Vehicle.tenant_id)
          .outerjoin(Employee, Employee.id == Vehicle.registered_by_employee_id)
     )


def _ensure_unit_access(user: dict, unit_id: int) -> None:
     if is_customer(user) and user.get("unit_id") != unit_id:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only manage vehicles of your own unit")


def _get_vehicle_or_404(db: Session, vehicle_id: int) -> Vehicle:
     vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id, Vehicle.is_active.is_(True)).first()
     if not vehicle:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")
     return vehicle


def _ensure_number_free(db: Session, number: str, exclude_id: Optional[int] = None) -> None:
     query = db.query(Vehicle.id).filter(Vehicle.vehicle_number == number, Vehicle.is_active.is_(True))
     if exclude_id is not None:
          query = query.filter(Vehicle.id != exclude_id)
     if query.first():
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Vehicle {number} is already registered")


def _ensure_tenant_in_unit(db: Session, tenant_id: Optional[int], unit_id: int) -> None:
     if tenant_id is None:
          return
     tenant = db.query(Tenant.id).filter(Tenant.id == tenant_id, Tenant.unit_id == unit_id).first()
     if not tenant:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tenant does not belong to this unit")


@router.get("", summary="List vehicles")
def list_vehicles(
     unit_id: Optional[int] = Query(None),
     customer_id: Optional[int] = Query(None),
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     query = _vehicle_query(db).filter(Vehicle.is_active.is_(True))
     if is_customer(user):
          query = query.filter(Vehicle.unit_id == user.get("unit_id"))
     if unit_id is not None:
          query = query.filter(Vehicle.unit_id == unit_id)
     if customer_id is not None:
          query = query.filter(Vehicle.customer_id == customer_id)

     rows = query.order_by(Unit.unit_no, Vehicle.vehicle_number).all()
     return {"vehicles": [row_to_dict(row, exclude=("rc_file_data",)) for row in rows]}


@router.get("/{vehicle_id}", summary="Get a vehicle")
def get_vehicle(
     vehicle_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     row = _vehicle_query(db).filter(Vehicle.id == vehicle_id, Vehicle.is_active.is_(True)).first()
     if row is None:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")
     _ensure_unit_access(user, row[0].unit_id)
     return {"vehicle": row_to_dict(row)}


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register a vehicle")
def create_vehicle(
     body: VehicleCreate,
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     _ensure_unit_access(user, body.unit_id)
     unit = db.query(Unit).filter(Unit.id == body.unit_id).first()
     if not unit:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unit not found")
     _ensure_tenant_in_unit(db, body.tenant_id, unit.id)
     _ensure_number_free(db, body.vehicle_number)

     if is_customer(user):
          customer_id = user["id"]
     elif body.customer_id is not None:
          owner = db.query(Customer.id).filter(Customer.id == body.customer_id, Customer.unit_id == unit.id).first()
          if not owner:
               raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Customer does not belong to this unit")
          customer_id = body.customer_id
     else:
          owner = db.query(Customer.id).filter(Customer.unit_id == unit.id, Customer.is_active.is_(True)).first()
          customer_id = owner[0] if owner else None

     vehicle = Vehicle(
          unit_id=unit.id,
          customer_id=customer_id,
          tenant_id=body.tenant_id,
          vehicle_number=body.vehicle_number,
          vehicle_type=body.vehicle_type,
          make=body.make,
          model=body.model,
          color=body.color,
          rc_file_name=body.rc_file_name,
          rc_file_data=body.rc_file_data,
          registered_by_employee_id=None if is_customer(user) else user["id"],
          is_active=True,
     )
     db.add(vehicle)
     db.flush()

     write_audit_log(
          db, "vehicle_registered", "vehicle", vehicle.id,
          f"Vehicle {vehicle.vehicle_number} registered for unit {unit.unit_no}", user,
     )
     db.commit()
     return {"message": "Vehicle registered successfully", "vehicle": model_to_dict(vehicle, exclude=("rc_file_data",))}


@router.put("/{vehicle_id}", summary="Update a vehicle")
def update_vehicle(
     vehicle_id: int,
     body: VehicleUpdate,
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     vehicle = _get_vehicle_or_404(db, vehicle_id)
     _ensure_unit_access(user, vehicle.unit_id)

     changes = body.model_dump(exclude_unset=True)
     if not changes:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")
     if changes.get("vehicle_number"):
          _ensure_number_free(db, changes["vehicle_number"], exclude_id=vehicle.id)
     if "tenant_id" in changes:
          _ensure_tenant_in_unit(db, changes["tenant_id"], vehicle.unit_id)

     for key, value in changes.items():
          setattr(vehicle, key, value)

     write_audit_log(
          db, "vehicle_updated", "vehicle", vehicle.id,
          f"Vehicle {vehicle.vehicle_number} updated ({', '.join(sorted(changes))})", user,
     )
     db.commit()
     return {"message": "Vehicle updated successfully", "vehicle": model_to_dict(vehicle, exclude=("rc_file_data",))}


@router.delete("/{vehicle_id}", summary="Remove a vehicle")
def delete_vehicle(
     vehicle_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     vehicle = _get_vehicle_or_404(db, vehicle_id)
     _ensure_unit_access(user, vehicle.unit_id)

     vehicle.is_active = False
     write_audit_log(db, "vehicle_removed", "vehicle", vehicle.id, f"Vehicle {vehicle.vehicle_number} removed", user)
     db.commit()
     return {"message": "Vehicle removed"}
