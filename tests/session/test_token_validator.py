from __future__ import annotations

import pytest

from src.medhir_portal.medhir_portal.core.enums import Role
from src.medhir_portal.medhir_portal.core.exceptions import DecodeFailure
from src.medhir_portal.medhir_portal.session.token import TokenValidator, parse_roles


@pytest.fixture
def validator(clock):
    return TokenValidator(now_seconds=clock.now_seconds)


@pytest.mark.parametrize("token", [None, "", "not-a-jwt", "a.b.c", 42])
def test_absent_or_malformed_token_is_expired(validator, token):
    assert validator.is_expired(token) is True


def test_valid_token_is_not_expired(validator, make_token):
    assert validator.is_expired(make_token(exp_in_seconds=60)) is False


def test_past_exp_is_expired(validator, make_token):
    assert validator.is_expired(make_token(exp_in_seconds=-1)) is True


def test_exp_equal_to_now_is_not_expired(validator, make_token):
    assert validator.is_expired(make_token(exp_in_seconds=0)) is False


def test_token_without_exp_is_expired(validator, make_token):
    token = make_token(exp="soon")

    assert validator.is_expired(token) is True


def test_signature_is_not_verified(validator, make_token):
    token = make_token()
    header, payload, _signature = token.split(".")

    claims = validator.decode(f"{header}.{payload}.tampered")

    assert claims.subject == "EMP-1"


def test_decode_exposes_roles_and_company(validator, make_token):
    claims = validator.decode(make_token(roles=["MANAGER", "EMPLOYEE", "INTERN"], companyId="CMP-1"))

    assert claims.roles == frozenset({Role.MANAGER, Role.EMPLOYEE})
    assert claims.company_id == "CMP-1"
    assert claims.has_role(Role.MANAGER)


def test_decode_raises_decode_failure(validator):
    with pytest.raises(DecodeFailure):
        validator.decode("garbage")


def test_parse_roles_accepts_comma_string():
    assert parse_roles("employee, manager,,") == frozenset({Role.EMPLOYEE, Role.MANAGER})
    assert parse_roles(None) == frozenset()
    assert parse_roles(7) == frozenset()
