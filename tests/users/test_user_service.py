from __future__ import annotations

from decimal import Decimal

import pytest
from werkzeug.security import generate_password_hash

from timeclock.core.exceptions import NotFoundError, ValidationError
from timeclock.users.service import AdminCodeService, UserService


@pytest.fixture
def service(users):
    return UserService(users, default_hourly_rate=Decimal("15"))


def test_create_user_uses_default_rate(service, users):
    user_id = service.create_user(name=" Ann ", secret_code="12345678")

    user = users.get_by_id(user_id)
    assert user.name == "Ann"
    assert user.hourly_rate == Decimal("15")
    assert user.amount == Decimal("0")


@pytest.mark.parametrize("code", ["1234567", "123456789", "abcdefgh", ""])
def test_secret_code_must_be_eight_digits(service, code):
    with pytest.raises(ValidationError):
        service.create_user(name="Ann", secret_code=code)


def test_secret_codes_are_unique(service):
    service.create_user(name="Ann", secret_code="12345678")
    with pytest.raises(ValidationError, match="already in use"):
        service.create_user(name="Bob", secret_code="12345678")


def test_negative_rate_is_rejected(service):
    with pytest.raises(ValidationError):
        service.create_user(name="Ann", secret_code="12345678", hourly_rate="-1")


def test_update_user_fields(service, users):
    user_id = service.create_user(name="Ann", secret_code="12345678", hourly_rate="12")
    service.update_user(user_id, hourly_rate="20", amount="5.5")

    user = users.get_by_id(user_id)
    assert user.hourly_rate == Decimal("20")
    assert user.amount == Decimal("5.5")
    assert user.name == "Ann"


def test_update_may_keep_own_code(service):
    user_id = service.create_user(name="Ann", secret_code="12345678")
    service.update_user(user_id, secret_code="12345678")


def test_delete_unknown_user(service):
    with pytest.raises(NotFoundError):
        service.delete_user(5)


def test_admin_code_is_checked_against_hash():
    admin = AdminCodeService(generate_password_hash("99999999"))

    assert admin.is_admin_code("99999999")
    assert not admin.is_admin_code("12345678")
    assert not AdminCodeService("").is_admin_code("99999999")
