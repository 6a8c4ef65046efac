# /educenter/routers/users_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.deps import any_role, staff_only
from ..core.permissions import Principal
from ..models import common_model, report_model, user_model
from ..services import dashboard_service, database_service, user_service

router = APIRouter()

DB = database_service.DatabaseService
get_db = database_service.get_db_service


# --- USER COLLECTION ENDPOINTS (/users) ---

@router.post("", response_model=user_model.UserRead, status_code=status.HTTP_201_CREATED, summary="Create a User")
def create_user(payload: user_model.UserCreate, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return user_service.create_user(db, payload)


@router.get("", response_model=List[user_model.UserRead], summary="List Users")
def list_users(
    role: Optional[str] = None,
    first_name: Optional[str] = Query(None, alias="firstName"),
    last_name: Optional[str] = Query(None, alias="lastName"),
    phone: Optional[str] = None,
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return user_service.list_users(db, role=role, first_name=first_name, last_name=last_name, phone=phone)


@router.get("/me", response_model=user_model.UserRead, summary="Profile of the Caller")
def get_me(db: DB = Depends(get_db), principal: Principal = Depends(any_role)):
    return user_service.get_user(db, principal.id)


@router.patch("/me/update", response_model=user_model.UserRead, summary="Update the Caller's Profile")
def update_me(payload: user_model.UserUpdate, db: DB = Depends(get_db), principal: Principal = Depends(any_role)):
    return user_service.update_me(db, principal.id, payload)


@router.get("/dashboard", response_model=report_model.Dashboard, summary="Admin Dashboard")
def dashboard(db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return dashboard_service.build_dashboard(db)


@router.get("/admins", response_model=List[user_model.UserRead], summary="List Admins")
def list_admins(db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return user_service.list_admins(db)


@router.get("/students", response_model=List[user_model.StudentBrief], summary="List Students")
def list_students(
    id: Optional[int] = None,
    first_name: Optional[str] = Query(None, alias="firstName"),
    last_name: Optional[str] = Query(None, alias="lastName"),
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return user_service.list_students(db, user_id=id, first_name=first_name, last_name=last_name)


@router.get("/all/students", response_model=List[user_model.StudentPaymentView], summary="Students with Their Monthly Payments")
def all_students(
    group_id: Optional[int] = Query(None, alias="groupId"),
    paid: Optional[bool] = None,
    first_name: Optional[str] = Query(None, alias="firstName"),
    last_name: Optional[str] = Query(None, alias="lastName"),
    phone: Optional[str] = None,
    address: Optional[str] = None,
    month_for: Optional[str] = Query(None, alias="monthFor"),
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return user_service.students_payment_view(
        db, group_id=group_id, paid=paid, first_name=first_name, last_name=last_name,
        phone=phone, address=address, month_for=month_for,
    )


@router.get("/workers", response_model=List[user_model.WorkerRead], summary="List Staff and Teachers")
def list_workers(db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return user_service.list_workers(db)


# --- INDIVIDUAL USER ENDPOINTS (/users/{user_id}) ---

@router.patch("/{user_id}", response_model=user_model.UserRead, summary="Update a User")
def update_user(user_id: int, payload: user_model.UserUpdate, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return user_service.update_user(db, user_id, payload)


@router.get("/{user_id}", response_model=user_model.UserRead, summary="Get a Single User")
def get_user(user_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return user_service.get_user(db, user_id)


@router.delete("/{user_id}", response_model=common_model.MessageResponse, summary="Delete a User")
def delete_user(user_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return user_service.delete_user(db, user_id)
