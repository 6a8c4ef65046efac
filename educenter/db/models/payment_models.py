# /educenter/db/models/payment_models.py

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from ..base_class import Base

PAYMENT_TYPES = ("click", "naxt", "percheslinei")


class Payment(Base):
    """
    One tuition payment of a student for a group and a billing month.

    `paid` is derived: every row of a (user, group, month_for) key is marked
    paid once the key's amounts add up to the group price.
    """
    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    paid = Column(Boolean, nullable=False, default=False)
    month_for = Column(String(7), nullable=False, index=True)
    payment_type = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=True)

    user = relationship("User", back_populates="payments")
    group = relationship("Group", back_populates="payments")
    course = relationship("Course", back_populates="payments")
