# /educenter/services/database_helpers/payment_repository_sql.py

"""
SQLAlchemy queries for the billing ledger.
"""

from typing import Dict, List, Optional, Set

import pandas as pd
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from educenter.db.models.catalog_models import Group
from educenter.db.models.payment_models import Payment
from educenter.db.models.user_models import User

from .user_repository_sql import name_filter


class PaymentRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_payment(self, payment_id: int) -> Optional[Payment]:
        return (
            self.db.query(Payment)
            .options(selectinload(Payment.user), selectinload(Payment.group))
            .filter(Payment.id == payment_id)
            .first()
        )

    def get_payments(
        self,
        paid: Optional[bool] = None,
        student_name: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        group_id: Optional[int] = None,
        month_for: Optional[str] = None,
        active_groups_only: bool = False,
        newest_first: bool = False,
    ) -> List[Payment]:
        query = (
            self.db.query(Payment)
            .join(User, Payment.user_id == User.id)
            .join(Group, Payment.group_id == Group.id)
            .options(selectinload(Payment.user), selectinload(Payment.group))
        )
        if paid is not None:
            query = query.filter(Payment.paid.is_(paid))
        if student_name:
            query = query.filter(name_filter(User.first_name, User.last_name, student_name))
        if first_name:
            query = query.filter(User.first_name.ilike(f"%{first_name.strip()}%"))
        if last_name:
            query = query.filter(User.last_name.ilike(f"%{last_name.strip()}%"))
        if group_id:
            query = query.filter(Payment.group_id == group_id)
        if month_for:
            query = query.filter(Payment.month_for == month_for)
        if active_groups_only:
            query = query.filter(Group.status == "active")
        if newest_first:
            return query.order_by(Payment.created_at.desc(), Payment.id.desc()).all()
        return query.order_by(Payment.id).all()

    def get_payments_for_key(self, user_id: int, group_id: int, month_for: str) -> List[Payment]:
        """All rows of one (user, group, month) key, locked for the rest of the transaction."""
        return (
            self.db.query(Payment)
            .filter(
                Payment.user_id == user_id,
                Payment.group_id == group_id,
                Payment.month_for == month_for,
            )
            .order_by(Payment.id)
            .with_for_update()
            .all()
        )

    def get_payments_of_user(self, user_id: int) -> List[Payment]:
        return self.db.query(Payment).filter(Payment.user_id == user_id).order_by(Payment.id).all()

    def get_paid_months(self, user_id: int, group_id: int) -> Set[str]:
        rows = (
            self.db.query(Payment.month_for)
            .filter(Payment.user_id == user_id, Payment.group_id == group_id, Payment.paid.is_(True))
            .distinct()
            .all()
        )
        return {row[0] for row in rows}

    def sum_paid_for_month(self, month_for: str):
        return (
            self.db.query(func.coalesce(func.sum(Payment.amount), 0))
            .filter(Payment.paid.is_(True), Payment.month_for == month_for)
            .scalar()
        )

    def get_paid_by_month(self, prefix: Optional[str] = None) -> pd.DataFrame:
        """
        Paid amounts grouped by billing month as a DataFrame with the columns
        `month_for` and `amount`. `prefix` narrows to months starting with it,
        e.g. "2024" for one year.
        """
        query = (
            self.db.query(Payment.month_for, func.sum(Payment.amount))
            .filter(Payment.paid.is_(True))
        )
        if prefix:
            query = query.filter(Payment.month_for.like(f"{prefix}%"))
        rows = query.group_by(Payment.month_for).all()
        return pd.DataFrame(rows, columns=["month_for", "amount"])

    def get_paid_user_ids_for_month(self, month_for: str) -> Set[int]:
        rows = (
            self.db.query(Payment.user_id)
            .filter(Payment.paid.is_(True), Payment.month_for == month_for)
            .distinct()
            .all()
        )
        return {row[0] for row in rows}

    def add_payment(self, record: Dict) -> Payment:
        payment = Payment(**record)
        self.db.add(payment)
        self.db.flush()
        return payment

    def update_payment(self, payment: Payment, data: Dict) -> Payment:
        for key, value in data.items():
            setattr(payment, key, value)
        self.db.flush()
        return payment

    def delete_payment(self, payment: Payment) -> None:
        self.db.delete(payment)
        self.db.flush()
