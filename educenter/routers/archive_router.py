# /educenter/routers/archive_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.deps import staff_only
from ..core.permissions import Principal
from ..models import archive_model, common_model, user_model
from ..services import archive_service, database_service

router = APIRouter()

DB = database_service.DatabaseService
get_db = database_service.get_db_service


@router.post("", response_model=archive_model.ArchivedUserRead, status_code=status.HTTP_201_CREATED, summary="Archive a User")
def archive_user(payload: archive_model.ArchiveCreate, db: DB = Depends(get_db), principal: Principal = Depends(staff_only)):
    return archive_service.archive_user(db, payload, principal)


@router.get("", response_model=List[archive_model.ArchivedUserRead], summary="List Archived Users")
def list_archived_users(
    first_name: Optional[str] = Query(None, alias="firstName"),
    last_name: Optional[str] = Query(None, alias="lastName"),
    phone: Optional[str] = None,
    role_id: Optional[int] = Query(None, alias="roleId"),
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return archive_service.list_archived_users(db, first_name=first_name, last_name=last_name, phone=phone, role_id=role_id)


@router.put("/restore/{archive_id}", response_model=user_model.UserRead, summary="Restore an Archived User")
def restore_user(archive_id: int, db: DB = Depends(get_db), principal: Principal = Depends(staff_only)):
    return archive_service.restore_user(db, archive_id, principal)


@router.get("/{archive_id}", response_model=archive_model.ArchivedUserRead, summary="Get a Single Archived User")
def get_archived_user(archive_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return archive_service.get_archived_user(db, archive_id)


@router.delete("/{archive_id}", response_model=common_model.MessageResponse, summary="Delete an Archived User")
def delete_archived_user(archive_id: int, db: DB = Depends(get_db), principal: Principal = Depends(staff_only)):
    return archive_service.delete_archived_user(db, archive_id, principal)
