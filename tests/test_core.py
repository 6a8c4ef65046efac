# /tests/test_core.py

import datetime
import json

import pytest
from fastapi.exceptions import RequestValidationError

from educenter.core import clock
from educenter.core.exceptions import (
    BadRequestError, ConflictError, service_error_handler, validation_error_handler,
)
from educenter.core.permissions import Principal, RoleName, has_role, parse_role
from educenter.core.security import (
    create_access_token, decode_access_token, get_password_hash, verify_password,
)


def test_password_hashing():
    hashed = get_password_hash("secret1")

    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_token_claims_and_expiry():
    claims = decode_access_token(create_access_token(7, "aziz", "teacher"))

    assert (claims["id"], claims["username"], claims["role"]) == (7, "aziz", "teacher")
    assert decode_access_token(create_access_token(7, "aziz", "teacher", expires_minutes=-1)) is None
    assert decode_access_token("not-a-token") is None


def test_roles_are_a_closed_set():
    teacher = Principal(id=1, username="t", role=parse_role("teacher"))

    assert parse_role("janitor") is None
    assert has_role(teacher, [RoleName.TEACHER])
    assert not has_role(Principal(id=2, username=None, role=None), list(RoleName))
    assert Principal(id=3, username="s", role=RoleName.SUPER_ADMIN).is_staff


def test_calendar_helpers():
    assert clock.weekday_name(datetime.date(2024, 1, 1)) == "Monday"
    assert clock.parse_month_for("2024-12") == (2024, 12)
    assert list(clock.iter_months((2023, 11), (2024, 2))) == [(2023, 11), (2023, 12), (2024, 1), (2024, 2)]
    # 20:00 UTC is already the next day in Tashkent.
    assert clock.to_local_date(datetime.datetime(2024, 1, 1, 20, 0)) == datetime.date(2024, 1, 2)
    for bad in ("2024-13", "2024-1", None):
        with pytest.raises(BadRequestError):
            clock.parse_month_for(bad)
    with pytest.raises(BadRequestError):
        clock.parse_date("2024-02-30")


@pytest.mark.asyncio
async def test_service_errors_render_as_detail():
    response = await service_error_handler(None, ConflictError("Student already in group"))

    assert response.status_code == 409
    assert json.loads(response.body) == {"detail": "Student already in group"}


@pytest.mark.asyncio
async def test_validation_errors_render_as_400():
    exc = RequestValidationError([{"loc": ("body", "monthFor"), "msg": "Field required", "type": "missing"}])

    response = await validation_error_handler(None, exc)

    assert response.status_code == 400
    assert json.loads(response.body) == {"detail": "monthFor: Field required"}
