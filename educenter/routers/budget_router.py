# /educenter/routers/budget_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.clock import today_local
from ..core.deps import staff_only
from ..core.permissions import Principal
from ..models import common_model, payment_model, report_model
from ..services import budget_service, database_service, payment_service

router = APIRouter()

DB = database_service.DatabaseService
get_db = database_service.get_db_service


@router.get("", response_model=report_model.BudgetSummary, summary="Budget Summary of a Month")
def budget_summary(
    month: Optional[int] = None,
    year: Optional[int] = None,
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    today = today_local()
    return budget_service.budget_summary(db, month or today.month, year or today.year)


@router.get("/payments", response_model=List[payment_model.PaymentRead], summary="Paid Payments for the Budget Page")
def budget_payments(
    first_name: Optional[str] = Query(None, alias="firstName"),
    last_name: Optional[str] = Query(None, alias="lastName"),
    group_id: Optional[int] = Query(None, alias="groupId"),
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return payment_service.filter_payments(db, True, first_name=first_name, last_name=last_name, group_id=group_id)


@router.post("/payments", response_model=payment_model.PaymentRead, status_code=status.HTTP_201_CREATED, summary="Record a Payment")
def create_budget_payment(payload: payment_model.PaymentCreate, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return payment_service.record_payment(db, payload)


@router.patch("/payments/{payment_id}", response_model=payment_model.PaymentRead, summary="Correct a Payment")
def update_budget_payment(payment_id: int, payload: payment_model.BudgetPaymentUpdate, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return payment_service.update_budget_payment(db, payment_id, payload)


@router.delete("/payments/{payment_id}", response_model=common_model.MessageResponse, summary="Delete a Payment")
def delete_budget_payment(payment_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return payment_service.delete_payment(db, payment_id)
