# /educenter/db/models/user_models.py

"""
ORM models for identities: roles, users (students, teachers and staff share
one table, distinguished by their role) and archived user snapshots.
"""

from sqlalchemy import (
    Column, DateTime, ForeignKey, Integer, Numeric, String, Table, func,
)
from sqlalchemy.orm import relationship

from ..base_class import Base

# Roster membership. A student may sit in many groups and a group holds many
# students; the pair is the primary key so a student can appear once per group.
group_students = Table(
    "group_students",
    Base.metadata,
    Column("group_id", Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)

    users = relationship("User", back_populates="role")


class User(Base):
    """
    A person known to the center. The role decides which of the optional
    columns are meaningful: `salary` and `percent` for teachers, `course_id`
    for students.
    """
    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    phone = Column(String, unique=True, nullable=False, index=True)
    username = Column(String, unique=True, nullable=True, index=True)
    password_hash = Column(String, nullable=True)
    address = Column(String, nullable=True)
    specialty = Column(String, nullable=True)

    # Derived from the groups the teacher runs; never written from a request.
    salary = Column(Numeric(10, 2), nullable=True)
    percent = Column(Numeric(5, 2), nullable=True)

    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    role = relationship("Role", back_populates="users", lazy="joined")
    course = relationship("Course", back_populates="users")

    groups = relationship("Group", secondary=group_students, back_populates="students")
    groups_as_teacher = relationship("Group", back_populates="teacher", foreign_keys="Group.teacher_id")

    payments = relationship("Payment", back_populates="user", cascade="all, delete-orphan")
    attendances = relationship(
        "Attendance", back_populates="user", cascade="all, delete-orphan",
        foreign_keys="Attendance.user_id",
    )
    teacher_attendances = relationship(
        "TeacherAttendance", back_populates="teacher", cascade="all, delete-orphan",
        foreign_keys="TeacherAttendance.teacher_id",
    )
    applications = relationship("Application", back_populates="user")

    @property
    def role_name(self):
        return self.role.name if self.role else None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class ArchivedUser(Base):
    """A frozen copy of a user taken before removal, restorable later."""
    __tablename__ = "archived_users"

    id = Column(Integer, primary_key=True, index=True)
    original_user_id = Column(Integer, nullable=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    phone = Column(String, nullable=False, index=True)
    username = Column(String, nullable=True)
    password_hash = Column(String, nullable=True)
    address = Column(String, nullable=True)
    specialty = Column(String, nullable=True)
    salary = Column(Numeric(10, 2), nullable=True)
    percent = Column(Numeric(5, 2), nullable=True)
    course_id = Column(Integer, nullable=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    archived_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    role = relationship("Role", lazy="joined")
