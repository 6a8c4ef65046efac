# /educenter/models/common_model.py

"""
Shared building blocks for the API contracts.

Every contract derives from `CamelModel`: attributes are snake_case in
Python, keys are camelCase on the wire, and either spelling is accepted on
input. Money is held as `Decimal` and written to JSON as a number.
"""

from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

Money = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]

MONTH_FOR_PATTERN = r"^\d{4}-\d{2}$"


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str


class SalaryChange(CamelModel):
    """Attached to responses of calls that recompute a teacher's salary."""
    message: Optional[str] = None
    teacher_salary: Optional[Money] = Field(default=None, description="The recomputed salary of the group's teacher.")
