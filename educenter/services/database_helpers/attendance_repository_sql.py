# /educenter/services/database_helpers/attendance_repository_sql.py

"""
SQLAlchemy queries for the student attendance ledger, the teacher attendance
ledger and the lesson register.
"""

import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from educenter.db.models.attendance_models import Attendance, Lesson, TeacherAttendance
from educenter.db.models.user_models import User

from .user_repository_sql import name_filter


class AttendanceRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Student Attendance Methods ---

    def get_attendance(self, attendance_id: int) -> Optional[Attendance]:
        return (
            self.db.query(Attendance)
            .options(selectinload(Attendance.user), selectinload(Attendance.group))
            .filter(Attendance.id == attendance_id)
            .first()
        )

    def get_attendances(self, group_id: Optional[int] = None) -> List[Attendance]:
        query = self.db.query(Attendance).options(selectinload(Attendance.user))
        if group_id:
            query = query.filter(Attendance.group_id == group_id)
        return query.order_by(Attendance.date, Attendance.id).all()

    def get_attendances_for_day(
        self, group_id: int, day: datetime.date, student_name: Optional[str] = None
    ) -> List[Attendance]:
        query = (
            self.db.query(Attendance)
            .join(User, Attendance.user_id == User.id)
            .options(selectinload(Attendance.user))
            .filter(Attendance.group_id == group_id, Attendance.date == day)
        )
        if student_name:
            query = query.filter(name_filter(User.first_name, User.last_name, student_name))
        return query.order_by(User.first_name, User.last_name).all()

    def get_attendances_between(
        self, group_id: int, start: datetime.date, end: datetime.date
    ) -> List[Attendance]:
        return (
            self.db.query(Attendance)
            .filter(Attendance.group_id == group_id, Attendance.date >= start, Attendance.date <= end)
            .order_by(Attendance.date)
            .all()
        )

    def get_attendances_by_user_keys(
        self, group_id: int, day: datetime.date, user_ids: List[int]
    ) -> Dict[int, Attendance]:
        if not user_ids:
            return {}
        rows = (
            self.db.query(Attendance)
            .filter(
                Attendance.group_id == group_id,
                Attendance.date == day,
                Attendance.user_id.in_(user_ids),
            )
            .with_for_update()
            .all()
        )
        return {row.user_id: row for row in rows}

    def attendance_exists(self, group_id: int, day: datetime.date) -> bool:
        return (
            self.db.query(Attendance.id)
            .filter(Attendance.group_id == group_id, Attendance.date == day)
            .first()
            is not None
        )

    def add_attendance(self, record: Dict) -> Attendance:
        attendance = Attendance(**record)
        self.db.add(attendance)
        self.db.flush()
        return attendance

    def update_attendance(self, attendance: Attendance, data: Dict) -> Attendance:
        for key, value in data.items():
            setattr(attendance, key, value)
        self.db.flush()
        return attendance

    def delete_attendance(self, attendance: Attendance) -> None:
        self.db.delete(attendance)
        self.db.flush()

    # --- Teacher Attendance Methods ---

    def get_teacher_attendance(
        self, teacher_id: int, group_id: int, day: datetime.date
    ) -> Optional[TeacherAttendance]:
        return (
            self.db.query(TeacherAttendance)
            .filter(
                TeacherAttendance.teacher_id == teacher_id,
                TeacherAttendance.group_id == group_id,
                TeacherAttendance.date == day,
            )
            .first()
        )

    def get_teacher_attendances(
        self,
        group_id: Optional[int] = None,
        day: Optional[datetime.date] = None,
        teacher_id: Optional[int] = None,
    ) -> List[TeacherAttendance]:
        query = self.db.query(TeacherAttendance).options(
            selectinload(TeacherAttendance.teacher), selectinload(TeacherAttendance.group)
        )
        if group_id:
            query = query.filter(TeacherAttendance.group_id == group_id)
        if day:
            query = query.filter(TeacherAttendance.date == day)
        if teacher_id:
            query = query.filter(TeacherAttendance.teacher_id == teacher_id)
        return query.order_by(TeacherAttendance.date.desc(), TeacherAttendance.id.desc()).all()

    def add_teacher_attendance(self, record: Dict) -> TeacherAttendance:
        row = TeacherAttendance(**record)
        self.db.add(row)
        self.db.flush()
        return row

    def update_teacher_attendance(self, row: TeacherAttendance, data: Dict) -> TeacherAttendance:
        for key, value in data.items():
            setattr(row, key, value)
        self.db.flush()
        return row

    # --- Lesson Methods ---

    def get_lesson(self, lesson_id: int) -> Optional[Lesson]:
        return (
            self.db.query(Lesson)
            .options(selectinload(Lesson.group))
            .filter(Lesson.id == lesson_id)
            .first()
        )

    def get_lessons(
        self, group_id: Optional[int] = None, day: Optional[datetime.date] = None
    ) -> List[Lesson]:
        query = self.db.query(Lesson).options(selectinload(Lesson.group))
        if group_id:
            query = query.filter(Lesson.group_id == group_id)
        if day:
            query = query.filter(Lesson.lesson_day == day)
        return query.order_by(Lesson.lesson_date, Lesson.id).all()

    def get_lesson_by_day(self, group_id: int, day: datetime.date) -> Optional[Lesson]:
        return (
            self.db.query(Lesson)
            .filter(Lesson.group_id == group_id, Lesson.lesson_day == day)
            .first()
        )

    def get_first_lesson(self, group_id: int) -> Optional[Lesson]:
        return (
            self.db.query(Lesson)
            .filter(Lesson.group_id == group_id)
            .order_by(Lesson.lesson_date)
            .first()
        )

    def count_lessons(self, group_id: int) -> int:
        return self.db.query(Lesson).filter(Lesson.group_id == group_id).count()

    def add_lesson(self, record: Dict) -> Lesson:
        lesson = Lesson(**record)
        self.db.add(lesson)
        self.db.flush()
        return lesson

    def update_lesson(self, lesson: Lesson, data: Dict) -> Lesson:
        for key, value in data.items():
            setattr(lesson, key, value)
        self.db.flush()
        return lesson

    def delete_lesson(self, lesson: Lesson) -> None:
        self.db.delete(lesson)
        self.db.flush()
