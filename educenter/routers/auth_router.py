# /educenter/routers/auth_router.py

from fastapi import APIRouter, Depends

from ..core.deps import any_role
from ..core.permissions import Principal
from ..models import auth_model, common_model
from ..services import auth_service, database_service

router = APIRouter()


@router.post("/login", response_model=auth_model.LoginResponse, summary="Exchange Credentials for a Bearer Token")
def login(payload: auth_model.LoginRequest, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return auth_service.login(db, payload)


@router.post("/logout", response_model=common_model.MessageResponse, summary="Log Out")
def logout(_: Principal = Depends(any_role)):
    return auth_service.logout()
