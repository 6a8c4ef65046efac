# /educenter/db/models/catalog_models.py

"""
ORM models for the catalog: courses and the groups (class cohorts) that run
them.
"""

from sqlalchemy import (
    JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, Text,
    UniqueConstraint, func,
)
from sqlalchemy.orm import relationship

from ..base_class import Base
from .user_models import group_students

GROUP_STATUSES = ("active", "planned", "completed")


class Course(Base):
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Deleting a course deletes its groups and, through them, their payments.
    groups = relationship("Group", back_populates="course", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="course", cascade="all, delete-orphan")
    users = relationship("User", back_populates="course")


class Group(Base):
    """
    A class cohort of one course. Holds the weekly schedule, the monthly
    tuition price, the assigned teacher and the student roster.
    """
    __table_args__ = (UniqueConstraint("name", "course_id", name="uq_group_name_course"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    start_time = Column(String(5), nullable=True)
    end_time = Column(String(5), nullable=True)
    # English weekday names, e.g. ["Monday", "Wednesday", "Friday"].
    days_of_week = Column(JSON, nullable=False, default=list)
    status = Column(String, nullable=False, default="active", index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    course = relationship("Course", back_populates="groups")
    teacher = relationship("User", back_populates="groups_as_teacher", foreign_keys=[teacher_id])
    students = relationship("User", secondary=group_students, back_populates="groups")

    lessons = relationship("Lesson", back_populates="group", cascade="all, delete-orphan")
    attendances = relationship("Attendance", back_populates="group", cascade="all, delete-orphan")
    teacher_attendances = relationship("TeacherAttendance", back_populates="group", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="group", cascade="all, delete-orphan")
    applications = relationship("Application", back_populates="group")
