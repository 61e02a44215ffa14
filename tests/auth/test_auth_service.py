from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.bank_sales.bank_sales.auth.tokens import ALGORITHM, TokenService
from src.bank_sales.bank_sales.core.enums import Role
from src.bank_sales.bank_sales.core.exceptions import AuthenticationError, ValidationError

ADMIN_PASSWORD = "Admin123"
ADVISOR_PASSWORD = "Advisor123"


def test_token_round_trip_carries_identity(admin):
    tokens = TokenService("secret", 2)
    payload = tokens.decode(tokens.issue(admin))
    assert payload["id"] == admin.user_id
    assert payload["email"] == admin.email
    assert payload["roleId"] == Role.ADMIN.value


def test_expired_and_forged_tokens_are_rejected(admin):
    tokens = TokenService("secret", 1)
    expired = jwt.encode(
        {"id": admin.user_id, "exp": datetime.now(timezone.utc) - timedelta(seconds=5)},
        "secret",
        algorithm=ALGORITHM,
    )
    with pytest.raises(AuthenticationError, match="expired"):
        tokens.decode(expired)

    forged = TokenService("other-secret", 1).issue(admin)
    with pytest.raises(AuthenticationError, match="Invalid token"):
        tokens.decode(forged)


def test_login_succeeds_with_any_email_case(container, advisor_a):
    result = container.auth_service.authenticate("A@BANK.com", ADVISOR_PASSWORD)
    assert result.user.user_id == advisor_a.user_id
    assert result.to_dict()["user"]["roleName"] == "Advisor"
    caller = container.auth_service.resolve_token(result.token)
    assert caller.user_id == advisor_a.user_id
    assert caller.role == Role.ADVISOR
    assert not caller.is_admin


@pytest.mark.parametrize("email,password", [("a@bank.com", "Wrong1234"), ("ghost@bank.com", ADVISOR_PASSWORD)])
def test_bad_credentials_share_one_message(container, advisor_a, email, password):
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        container.auth_service.authenticate(email, password)


def test_resolve_token_sees_role_changes_and_deletions(container, users_repo, admin, advisor_a):
    token = container.token_service.issue(advisor_a)
    users_repo.update_user(advisor_a.user_id, role=Role.ADMIN)
    assert container.auth_service.resolve_token(token).is_admin

    users_repo.delete_by_id(advisor_a.user_id)
    with pytest.raises(AuthenticationError):
        container.auth_service.resolve_token(token)


def test_missing_token_is_an_authentication_error(container):
    with pytest.raises(AuthenticationError):
        container.auth_service.resolve_token(None)


def test_change_password_flow(container, admin):
    auth = container.auth_service
    with pytest.raises(AuthenticationError):
        auth.change_password(admin.user_id, "Wrong1234", "NewSecret1")
    with pytest.raises(ValidationError):
        auth.change_password(admin.user_id, ADMIN_PASSWORD, "weak")
    with pytest.raises(ValidationError):
        auth.change_password(admin.user_id, ADMIN_PASSWORD, ADMIN_PASSWORD)

    auth.change_password(admin.user_id, ADMIN_PASSWORD, "NewSecret1")
    assert auth.authenticate(admin.email, "NewSecret1").user.user_id == admin.user_id
    with pytest.raises(AuthenticationError):
        auth.authenticate(admin.email, ADMIN_PASSWORD)
