# /educenter/services/compensation_service.py

"""
Teacher compensation.

A teacher earns `percent` of the tuition their active groups are expected to
bring in: percent / 100 * sum(price * enrolled students), rounded half-up to
whole cents. The computation only reads; `refresh_teacher_salaries` is the
single place that writes the result back onto teacher rows, and every
enrollment-affecting service calls it inside its own transaction.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Optional

from educenter.core.permissions import RoleName

from .database_service import DatabaseService

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value if value is not None else 0)).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_teacher_salary(db: DatabaseService, teacher_id: int) -> Decimal:
    teacher = db.get_user_by_id(teacher_id)
    if teacher is None:
        return _money(0)
    if teacher.role_name != RoleName.TEACHER.value:
        # Only teachers have a derived salary; anyone else keeps what is stored.
        return _money(teacher.salary)

    percent = Decimal(str(teacher.percent or 0))
    if percent <= 0:
        return _money(0)

    revenue = sum(
        (Decimal(str(price)) * count for _, price, count in db.get_active_group_revenue_rows(teacher_id)),
        Decimal("0"),
    )
    return (percent * revenue / Decimal(100)).quantize(CENT, rounding=ROUND_HALF_UP)


def refresh_teacher_salaries(db: DatabaseService, teacher_ids: Iterable[Optional[int]]) -> Dict[int, Decimal]:
    """
    Recomputes and stores the salary of every distinct teacher in
    `teacher_ids`. Ids of users who are not teachers are skipped. Returns the
    new salaries keyed by teacher id.
    """
    updated: Dict[int, Decimal] = {}
    for teacher_id in sorted({tid for tid in teacher_ids if tid}):
        teacher = db.get_user_for_update(teacher_id)
        if teacher is None or teacher.role_name != RoleName.TEACHER.value:
            continue
        salary = compute_teacher_salary(db, teacher_id)
        if teacher.salary is None or _money(teacher.salary) != salary:
            logger.info("Teacher %s salary recomputed: %s -> %s", teacher_id, teacher.salary, salary)
        db.update_user(teacher, {"salary": salary})
        updated[teacher_id] = salary
    return updated


def refresh_teacher_salary(db: DatabaseService, teacher_id: Optional[int]) -> Optional[Decimal]:
    if not teacher_id:
        return None
    return refresh_teacher_salaries(db, [teacher_id]).get(teacher_id)
