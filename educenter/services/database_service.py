# /educenter/services/database_service.py

from contextlib import contextmanager
from typing import Dict, Generator, Iterable, List, Optional, Set

import pandas as pd
from fastapi import Depends
from sqlalchemy.orm import Session

# --- Core Database Setup ---
from educenter.db.database import get_db

# --- Repository Imports ---
from .database_helpers.application_repository_sql import ApplicationRepositorySQL
from .database_helpers.attendance_repository_sql import AttendanceRepositorySQL
from .database_helpers.catalog_repository_sql import CatalogRepositorySQL
from .database_helpers.payment_repository_sql import PaymentRepositorySQL
from .database_helpers.user_repository_sql import UserRepositorySQL


class DatabaseService:
    """
    Facade over the SQL repositories for one request-scoped session.

    Services talk only to this class. Multi-step mutations run inside
    `transaction()`, which commits when the block finishes and rolls back on
    any exception.
    """

    def __init__(self, db_session: Session):
        if db_session is None:
            raise ValueError("A database session is required.")
        self.session = db_session
        self.user_repo = UserRepositorySQL(db_session)
        self.catalog_repo = CatalogRepositorySQL(db_session)
        self.attendance_repo = AttendanceRepositorySQL(db_session)
        self.payment_repo = PaymentRepositorySQL(db_session)
        self.application_repo = ApplicationRepositorySQL(db_session)

    @contextmanager
    def transaction(self):
        try:
            yield self
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def flush(self) -> None:
        self.session.flush()

    def refresh(self, instance) -> None:
        self.session.refresh(instance)

    # --- ROLE METHODS (DELEGATED) ---
    def get_role_by_id(self, role_id: int): return self.user_repo.get_role_by_id(role_id)
    def get_role_by_name(self, name: str): return self.user_repo.get_role_by_name(name)
    def get_all_roles(self) -> List: return self.user_repo.get_all_roles()
    def add_role(self, name: str): return self.user_repo.add_role(name)
    def delete_role(self, role) -> None: self.user_repo.delete_role(role)
    def count_users_with_role(self, role_id: int) -> int: return self.user_repo.count_users_with_role(role_id)

    # --- USER METHODS (DELEGATED) ---
    def get_user_by_id(self, user_id: int): return self.user_repo.get_user_by_id(user_id)
    def get_user_for_update(self, user_id: int): return self.user_repo.get_user_for_update(user_id)
    def get_user_by_username(self, username: str): return self.user_repo.get_user_by_username(username)
    def get_user_by_phone(self, phone: str): return self.user_repo.get_user_by_phone(phone)
    def get_user_with_role(self, user_id: int, role_name: str): return self.user_repo.get_user_with_role(user_id, role_name)
    def get_users_with_role(self, user_ids: Iterable[int], role_name: str) -> List: return self.user_repo.get_users_with_role(user_ids, role_name)
    def get_users(self, **filters) -> List: return self.user_repo.get_users(**filters)
    def get_users_excluding_roles(self, role_names: Iterable[str]) -> List: return self.user_repo.get_users_excluding_roles(role_names)
    def get_users_with_salary(self) -> List: return self.user_repo.get_users_with_salary()
    def add_user(self, record: Dict): return self.user_repo.add_user(record)
    def update_user(self, user, data: Dict): return self.user_repo.update_user(user, data)
    def delete_user(self, user) -> None: self.user_repo.delete_user(user)

    # --- ARCHIVE METHODS (DELEGATED) ---
    def add_archived_user(self, record: Dict): return self.user_repo.add_archived_user(record)
    def get_archived_user(self, archive_id: int): return self.user_repo.get_archived_user(archive_id)
    def get_archived_users(self, **filters) -> List: return self.user_repo.get_archived_users(**filters)
    def delete_archived_user(self, snapshot) -> None: self.user_repo.delete_archived_user(snapshot)

    # --- COURSE METHODS (DELEGATED) ---
    def get_course_by_id(self, course_id: int): return self.catalog_repo.get_course_by_id(course_id)
    def get_course_by_name(self, name: str): return self.catalog_repo.get_course_by_name(name)
    def get_courses(self, name: Optional[str] = None) -> List: return self.catalog_repo.get_courses(name)
    def count_courses(self) -> int: return self.catalog_repo.count_courses()
    def add_course(self, record: Dict): return self.catalog_repo.add_course(record)
    def update_course(self, course, data: Dict): return self.catalog_repo.update_course(course, data)
    def delete_course(self, course) -> None: self.catalog_repo.delete_course(course)

    # --- GROUP & ROSTER METHODS (DELEGATED) ---
    def get_group_by_id(self, group_id: int): return self.catalog_repo.get_group_by_id(group_id)
    def get_group_for_update(self, group_id: int): return self.catalog_repo.get_group_for_update(group_id)
    def get_group_by_name_and_course(self, name: str, course_id: int): return self.catalog_repo.get_group_by_name_and_course(name, course_id)
    def get_groups(self, **filters) -> List: return self.catalog_repo.get_groups(**filters)
    def get_groups_of_student(self, username: str) -> List: return self.catalog_repo.get_groups_of_student(username)
    def get_teacher_ids_of_student(self, user_id: int) -> List[int]: return self.catalog_repo.get_teacher_ids_of_student(user_id)
    def get_active_group_revenue_rows(self, teacher_id: int) -> List: return self.catalog_repo.get_active_group_revenue_rows(teacher_id)
    def count_groups(self, status: Optional[str] = None) -> int: return self.catalog_repo.count_groups(status)
    def count_distinct_students_in_active_groups(self) -> int: return self.catalog_repo.count_distinct_students_in_active_groups()
    def get_student_ids_in_active_groups(self) -> List[int]: return self.catalog_repo.get_student_ids_in_active_groups()
    def add_group(self, record: Dict): return self.catalog_repo.add_group(record)
    def update_group(self, group, data: Dict): return self.catalog_repo.update_group(group, data)
    def delete_group(self, group) -> None: self.catalog_repo.delete_group(group)
    def add_student_to_group(self, group, student) -> None: self.catalog_repo.add_student_to_group(group, student)
    def remove_student_from_group(self, group, student) -> None: self.catalog_repo.remove_student_from_group(group, student)
    def replace_roster(self, group, students: List) -> None: self.catalog_repo.replace_roster(group, students)

    # --- ATTENDANCE METHODS (DELEGATED) ---
    def get_attendance(self, attendance_id: int): return self.attendance_repo.get_attendance(attendance_id)
    def get_attendances(self, group_id: Optional[int] = None) -> List: return self.attendance_repo.get_attendances(group_id)
    def get_attendances_for_day(self, group_id: int, day, student_name: Optional[str] = None) -> List: return self.attendance_repo.get_attendances_for_day(group_id, day, student_name)
    def get_attendances_between(self, group_id: int, start, end) -> List: return self.attendance_repo.get_attendances_between(group_id, start, end)
    def get_attendances_by_user_keys(self, group_id: int, day, user_ids: List[int]) -> Dict: return self.attendance_repo.get_attendances_by_user_keys(group_id, day, user_ids)
    def attendance_exists(self, group_id: int, day) -> bool: return self.attendance_repo.attendance_exists(group_id, day)
    def add_attendance(self, record: Dict): return self.attendance_repo.add_attendance(record)
    def update_attendance(self, attendance, data: Dict): return self.attendance_repo.update_attendance(attendance, data)
    def delete_attendance(self, attendance) -> None: self.attendance_repo.delete_attendance(attendance)
    def get_teacher_attendance(self, teacher_id: int, group_id: int, day): return self.attendance_repo.get_teacher_attendance(teacher_id, group_id, day)
    def get_teacher_attendances(self, **filters) -> List: return self.attendance_repo.get_teacher_attendances(**filters)
    def add_teacher_attendance(self, record: Dict): return self.attendance_repo.add_teacher_attendance(record)
    def update_teacher_attendance(self, row, data: Dict): return self.attendance_repo.update_teacher_attendance(row, data)

    # --- LESSON METHODS (DELEGATED) ---
    def get_lesson(self, lesson_id: int): return self.attendance_repo.get_lesson(lesson_id)
    def get_lessons(self, group_id: Optional[int] = None, day=None) -> List: return self.attendance_repo.get_lessons(group_id, day)
    def get_lesson_by_day(self, group_id: int, day): return self.attendance_repo.get_lesson_by_day(group_id, day)
    def get_first_lesson(self, group_id: int): return self.attendance_repo.get_first_lesson(group_id)
    def count_lessons(self, group_id: int) -> int: return self.attendance_repo.count_lessons(group_id)
    def add_lesson(self, record: Dict): return self.attendance_repo.add_lesson(record)
    def update_lesson(self, lesson, data: Dict): return self.attendance_repo.update_lesson(lesson, data)
    def delete_lesson(self, lesson) -> None: self.attendance_repo.delete_lesson(lesson)

    # --- PAYMENT METHODS (DELEGATED) ---
    def get_payment(self, payment_id: int): return self.payment_repo.get_payment(payment_id)
    def get_payments(self, **filters) -> List: return self.payment_repo.get_payments(**filters)
    def get_payments_for_key(self, user_id: int, group_id: int, month_for: str) -> List: return self.payment_repo.get_payments_for_key(user_id, group_id, month_for)
    def get_payments_of_user(self, user_id: int) -> List: return self.payment_repo.get_payments_of_user(user_id)
    def get_paid_months(self, user_id: int, group_id: int) -> Set[str]: return self.payment_repo.get_paid_months(user_id, group_id)
    def sum_paid_for_month(self, month_for: str): return self.payment_repo.sum_paid_for_month(month_for)
    def get_paid_by_month(self, prefix: Optional[str] = None) -> pd.DataFrame: return self.payment_repo.get_paid_by_month(prefix)
    def get_paid_user_ids_for_month(self, month_for: str) -> Set[int]: return self.payment_repo.get_paid_user_ids_for_month(month_for)
    def add_payment(self, record: Dict): return self.payment_repo.add_payment(record)
    def update_payment(self, payment, data: Dict): return self.payment_repo.update_payment(payment, data)
    def delete_payment(self, payment) -> None: self.payment_repo.delete_payment(payment)

    # --- APPLICATION METHODS (DELEGATED) ---
    def get_application(self, application_id: int): return self.application_repo.get_application(application_id)
    def get_applications(self, **filters) -> List: return self.application_repo.get_applications(**filters)
    def add_application(self, record: Dict): return self.application_repo.add_application(record)
    def update_application(self, application, data: Dict): return self.application_repo.update_application(application, data)
    def delete_application(self, application) -> None: self.application_repo.delete_application(application)


def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """FastAPI dependency that provides a DatabaseService bound to the request's session."""
    yield DatabaseService(db_session=db)
