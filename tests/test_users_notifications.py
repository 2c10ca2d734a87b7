from datetime import date

import pytest
from werkzeug.security import check_password_hash

from leave_attendance.core.enums import Role
from leave_attendance.core.exceptions import AuthenticationError, AuthorizationError, ValidationError

ADMIN = 1
EMP = 2
PASSWORD = "secret123"


def test_login_with_valid_credentials(container):
    session_user = container.auth_service.authenticate(" mario ", PASSWORD)
    assert session_user.user_id == EMP
    assert session_user.role == Role.EMPLOYEE


def test_login_wrong_password_or_inactive(container, repos):
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("mario", "wrong")

    repos.users.set_active(EMP, is_active=False)
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("mario", PASSWORD)


def test_placeholder_hash_never_authenticates(container, repos):
    repos.users.create_user(
        full_name="Seed", username="seed", password_hash="CHANGE_ME", role=Role.EMPLOYEE, hire_date=None
    )
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("seed", "CHANGE_ME")


def test_create_account(container, repos):
    service = container.user_service
    user_id = service.create_account(
        current_role=Role.ADMIN,
        full_name="Luca Verdi",
        username="luca",
        password="abcdef",
        hire_date=date(2025, 2, 1),
    )

    user = service.get(user_id)
    assert user.hire_date == date(2025, 2, 1)
    assert check_password_hash(user.password_hash, "abcdef")

    with pytest.raises(ValidationError, match="already exists"):
        service.create_account(current_role=Role.ADMIN, full_name="L", username="luca", password="abcdef")
    with pytest.raises(ValidationError):
        service.create_account(current_role=Role.ADMIN, full_name="L", username="luca2", password="abc")
    with pytest.raises(AuthorizationError):
        service.create_account(current_role=Role.EMPLOYEE, full_name="L", username="luca3", password="abcdef")


def test_deactivate_employee_but_not_admin(container):
    service = container.user_service
    service.deactivate(current_role=Role.ADMIN, user_id=EMP)

    assert EMP not in [u.user_id for u in service.list_employees()]
    assert EMP in [u.user_id for u in service.list_employees(active_only=False)]
    with pytest.raises(ValidationError):
        service.deactivate(current_role=Role.ADMIN, user_id=ADMIN)


def test_notifications_mark_read(container):
    service = container.notification_service
    first = service.notify(EMP, "A", "first")
    service.notify_many([EMP, ADMIN], "B", "second")

    assert len(service.list_for_user(EMP, unread_only=True)) == 2
    assert service.mark_read(EMP, first) == 1
    assert [n.title for n in service.list_for_user(EMP, unread_only=True)] == ["B"]
    assert service.mark_read(EMP) == 1
    assert service.list_for_user(EMP, unread_only=True) == []
    assert len(service.list_for_user(ADMIN)) == 1
