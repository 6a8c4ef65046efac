# /educenter/routers/roles_router.py

from typing import List

from fastapi import APIRouter, Depends, status

from ..core.deps import staff_only
from ..core.permissions import Principal
from ..models import common_model, role_model
from ..services import database_service, role_service

router = APIRouter()

DB = database_service.DatabaseService
get_db = database_service.get_db_service


@router.post("", response_model=role_model.RoleRead, status_code=status.HTTP_201_CREATED, summary="Create a Role")
def create_role(payload: role_model.RoleCreate, db: DB = Depends(get_db), principal: Principal = Depends(staff_only)):
    return role_service.create_role(db, payload, principal)


@router.get("", response_model=List[role_model.RoleRead], summary="List Roles")
def list_roles(db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return role_service.list_roles(db)


@router.delete("/{role_id}", response_model=common_model.MessageResponse, summary="Delete a Role")
def delete_role(role_id: int, db: DB = Depends(get_db), principal: Principal = Depends(staff_only)):
    return role_service.delete_role(db, role_id, principal)
