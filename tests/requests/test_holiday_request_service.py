from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from timeclock.core.constants import DEFAULT_REQUEST_LIST_LIMIT
from timeclock.core.enums import RequestStatus
from timeclock.core.exceptions import InvalidCodeError, NotFoundError, ValidationError
from timeclock.requests.service import HolidayRequestService


@pytest.fixture
def service(holiday_requests, users, add_user):
    add_user()
    return HolidayRequestService(holiday_requests, users)


def _submit(service, **overrides):
    data = dict(
        secret_code="12345678",
        start_date=date(2025, 2, 3),
        end_date=date(2025, 2, 7),
        reason="Family trip",
        now=datetime(2025, 1, 6, 9, 0),
    )
    data.update(overrides)
    return service.submit(**data)


def test_submit_creates_pending_request(service, holiday_requests):
    request_id = _submit(service)

    req = holiday_requests.get(request_id)
    assert req.status == RequestStatus.PENDING
    assert req.user_name == "Ann"
    assert req.reason == "Family trip"


def test_submit_validation(service):
    with pytest.raises(ValidationError, match="cannot be after"):
        _submit(service, start_date=date(2025, 2, 8))
    with pytest.raises(ValidationError, match="Reason is required"):
        _submit(service, reason="  ")
    with pytest.raises(ValidationError, match="Start date is required"):
        _submit(service, start_date=None)
    with pytest.raises(ValidationError):
        _submit(service, secret_code="1234")


def test_submit_unknown_code(service):
    with pytest.raises(InvalidCodeError):
        _submit(service, secret_code="00000000")


def test_list_for_code_newest_first(service):
    first = _submit(service, now=datetime(2025, 1, 6, 9, 0))
    second = _submit(service, now=datetime(2025, 1, 7, 9, 0))

    rows = service.list_for_code("12345678")
    assert [r.request_id for r in rows] == [second, first]


def test_approve_only_once(service, holiday_requests):
    request_id = _submit(service)

    service.approve(request_id, admin_notes=" enjoy ", now=datetime(2025, 1, 8, 10, 0))
    req = holiday_requests.get(request_id)
    assert req.status == RequestStatus.APPROVED
    assert req.admin_notes == "enjoy"
    assert req.reviewed_by == "Admin"

    with pytest.raises(ValidationError, match="already been processed"):
        service.reject(request_id)


def test_decide_unknown_request(service):
    with pytest.raises(NotFoundError):
        service.approve(404)


def test_admin_list_filters(service, users, add_user):
    add_user(user_id=2, name="Bob", secret_code="87654321")
    _submit(service, now=datetime(2025, 1, 6, 9, 0))
    bob = _submit(service, secret_code="87654321", now=datetime(2025, 1, 10, 9, 0))
    service.reject(bob)

    assert [r.user_name for r in service.list_requests(status=RequestStatus.PENDING)] == ["Ann"]
    assert [r.user_name for r in service.list_requests(user_name="Bob")] == ["Bob"]
    assert len(service.list_requests(submitted_from=date(2025, 1, 7))) == 1


def test_admin_filters_apply_before_list_limit(service, add_user):
    add_user(user_id=2, name="Bob", secret_code="87654321")
    ann = _submit(service, now=datetime(2024, 12, 1, 9, 0))
    for minute in range(DEFAULT_REQUEST_LIST_LIMIT + 5):
        _submit(service, secret_code="87654321", now=datetime(2025, 1, 6, 9, 0) + timedelta(minutes=minute))

    assert [r.request_id for r in service.list_requests(user_name="Ann")] == [ann]
    older = service.list_requests(submitted_to=date(2024, 12, 31))
    assert [r.request_id for r in older] == [ann]
    assert len(service.list_requests()) == DEFAULT_REQUEST_LIST_LIMIT
