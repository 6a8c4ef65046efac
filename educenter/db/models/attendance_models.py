# /educenter/db/models/attendance_models.py

"""
ORM models for what happens in the classroom: the date-keyed student
attendance ledger, the teacher attendance ledger and the lesson register.
"""

from sqlalchemy import (
    Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship

from ..base_class import Base

ATTENDANCE_STATUSES = ("present", "absent", "late")
TEACHER_ATTENDANCE_STATUSES = ("absent_with_reason", "absent_without_reason")


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (UniqueConstraint("user_id", "group_id", "date", name="uq_attendance_user_group_date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    status = Column(String, nullable=False)
    grade = Column(Integer, nullable=True)
    marked_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="attendances", foreign_keys=[user_id])
    group = relationship("Group", back_populates="attendances")
    marked_by = relationship("User", foreign_keys=[marked_by_id])


class TeacherAttendance(Base):
    __tablename__ = "teacher_attendance"
    __table_args__ = (UniqueConstraint("teacher_id", "group_id", "date", name="uq_teacher_attendance_key"),)

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    status = Column(String, nullable=False)
    marked_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    teacher = relationship("User", back_populates="teacher_attendances", foreign_keys=[teacher_id])
    group = relationship("Group", back_populates="teacher_attendances")
    marked_by = relationship("User", foreign_keys=[marked_by_id])


class Lesson(Base):
    """One held lesson of a group. A group gets at most one lesson per day."""
    __table_args__ = (UniqueConstraint("group_id", "lesson_day", name="uq_lesson_group_day"),)

    id = Column(Integer, primary_key=True, index=True)
    lesson_name = Column(String, nullable=False)
    lesson_number = Column(Integer, nullable=False)
    lesson_date = Column(DateTime, nullable=False)
    lesson_day = Column(Date, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    group = relationship("Group", back_populates="lessons")
