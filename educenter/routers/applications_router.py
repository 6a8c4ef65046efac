# /educenter/routers/applications_router.py

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.deps import staff_only
from ..core.permissions import Principal
from ..models import application_model, common_model
from ..services import application_service, database_service

router = APIRouter()

DB = database_service.DatabaseService
get_db = database_service.get_db_service


# Public: the landing page posts leads without a token.
@router.post("", response_model=application_model.ApplicationRead, status_code=status.HTTP_201_CREATED, summary="Submit an Application")
def create_application(payload: application_model.ApplicationCreate, db: DB = Depends(get_db)):
    return application_service.create_application(db, payload)


@router.get("", response_model=application_model.ApplicationListResponse, summary="List Applications with Statistics")
def list_applications(
    first_name: Optional[str] = Query(None, alias="firstName"),
    last_name: Optional[str] = Query(None, alias="lastName"),
    phone: Optional[str] = None,
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return application_service.list_applications(db, first_name=first_name, last_name=last_name, phone=phone)


@router.patch("/{application_id}/assign-group", response_model=application_model.ApplicationRead, summary="Enroll the Applicant into a Group")
def assign_group(application_id: int, group_id: int = Query(..., alias="groupId"), db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return application_service.assign_group(db, application_id, group_id)


@router.patch("/{application_id}/remove-group", response_model=application_model.ApplicationRead, summary="Detach the Group")
def remove_group(application_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return application_service.remove_group(db, application_id)


@router.patch("/{application_id}/mark-contacted", response_model=application_model.ApplicationRead, summary="Mark the Applicant as Contacted")
def mark_contacted(application_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return application_service.mark_contacted(db, application_id)


@router.get("/{application_id}", response_model=application_model.ApplicationRead, summary="Get a Single Application")
def get_application(application_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return application_service.get_application(db, application_id)


@router.patch("/{application_id}", response_model=application_model.ApplicationRead, summary="Update an Application")
def update_application(application_id: int, payload: application_model.ApplicationUpdate, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return application_service.update_application(db, application_id, payload)


@router.delete("/{application_id}", response_model=common_model.MessageResponse, summary="Delete an Application")
def delete_application(application_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return application_service.delete_application(db, application_id)
