# /educenter/routers/payments_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.deps import staff_only
from ..core.permissions import Principal
from ..models import common_model, payment_model
from ..services import database_service, payment_service

router = APIRouter()

DB = database_service.DatabaseService
get_db = database_service.get_db_service


# --- PAYMENT COLLECTION ENDPOINTS (/payments) ---

@router.post("", response_model=payment_model.PaymentRead, status_code=status.HTTP_201_CREATED, summary="Record a Payment")
def record_payment(payload: payment_model.PaymentCreate, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return payment_service.record_payment(db, payload)


@router.get("", response_model=List[payment_model.PaymentRead], summary="List All Payments")
def list_payments(db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return payment_service.list_payments(db)


@router.get("/report", response_model=List[payment_model.PaymentRead], summary="Payments of Active Groups")
def payment_report(
    group_id: Optional[int] = Query(None, alias="groupId"),
    student_name: Optional[str] = Query(None, alias="studentName"),
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return payment_service.payment_report(db, group_id=group_id, student_name=student_name)


@router.get("/paid", response_model=List[payment_model.PaymentRead], summary="Paid Payments")
def paid_payments(
    student_name: Optional[str] = Query(None, alias="studentName"),
    group_id: Optional[int] = Query(None, alias="groupId"),
    month_for: Optional[str] = Query(None, alias="monthFor"),
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return payment_service.filter_payments(db, True, student_name=student_name, group_id=group_id, month_for=month_for)


@router.get("/unpaid", response_model=List[payment_model.PaymentRead], summary="Partial Payments")
def unpaid_payments(
    student_name: Optional[str] = Query(None, alias="studentName"),
    group_id: Optional[int] = Query(None, alias="groupId"),
    month_for: Optional[str] = Query(None, alias="monthFor"),
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return payment_service.filter_payments(db, False, student_name=student_name, group_id=group_id, month_for=month_for)


@router.get("/unpaid-months", response_model=payment_model.UnpaidMonthsResponse, summary="Months a Student Has Not Paid For")
def unpaid_months(
    user_id: int = Query(..., alias="userId"),
    group_id: int = Query(..., alias="groupId"),
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return payment_service.unpaid_months(db, user_id, group_id)


@router.get("/monthly-income", response_model=payment_model.IncomeResponse, summary="Income of One Month")
def monthly_income(month: int, year: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return payment_service.monthly_income(db, month, year)


@router.get("/yearly-income", response_model=payment_model.IncomeResponse, summary="Income of One Year")
def yearly_income(year: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return payment_service.yearly_income(db, year)


# --- INDIVIDUAL PAYMENT ENDPOINTS (/payments/{payment_id}) ---

@router.put("/{payment_id}", response_model=payment_model.PaymentRead, summary="Update a Payment")
def update_payment(payment_id: int, payload: payment_model.PaymentUpdate, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return payment_service.update_payment(db, payment_id, payload)


@router.delete("/{payment_id}", response_model=common_model.MessageResponse, summary="Delete a Payment")
def delete_payment(payment_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return payment_service.delete_payment(db, payment_id)


@router.get("/{payment_id}", response_model=payment_model.PaymentRead, summary="Get a Single Payment")
def get_payment(payment_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return payment_service.get_payment(db, payment_id)
