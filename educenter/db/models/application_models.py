# /educenter/db/models/application_models.py

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from ..base_class import Base


class Application(Base):
    """
    An enrollment lead. `status` flips to true once staff are in contact with
    the applicant or the lead has been converted into an enrolled student.
    """
    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    phone = Column(String, nullable=False, index=True)
    status = Column(Boolean, nullable=False, default=False)
    is_contacted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="SET NULL"), nullable=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="SET NULL"), nullable=True)

    user = relationship("User", back_populates="applications")
    group = relationship("Group", back_populates="applications")
    course = relationship("Course")
