# /educenter/routers/debtors_router.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.deps import staff_only
from ..core.permissions import Principal
from ..models import report_model
from ..services import database_service, debtor_service

router = APIRouter()


@router.get("", response_model=report_model.DebtorList, summary="Debtors of the Current Month")
def list_debtors(
    first_name: Optional[str] = Query(None, alias="firstName"),
    last_name: Optional[str] = Query(None, alias="lastName"),
    group_id: Optional[int] = Query(None, alias="groupId"),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
    _: Principal = Depends(staff_only),
):
    return debtor_service.list_debtors(db, first_name=first_name, last_name=last_name, group_id=group_id)
