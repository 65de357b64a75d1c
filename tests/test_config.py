"""
PIM Activate - Unit tests for the config / validation module.
"""

from pim_activate.config import (
    ROLE_NAMES,
    get_optional_env,
    validate_activation_request,
    validate_request_length,
    validate_resource_type,
    validate_role,
)


def _validate(**overrides):
    fields = {
        "username": "john.doe@contoso.com",
        "resource_type": "managementgroup",
        "resource_name": "P-C00",
        "role": "Contributor",
        "reason": "change work",
        "request_length": 8,
    }
    fields.update(overrides)
    return validate_activation_request(**fields)


# ─── validate_role ───────────────────────────────

def test_valid_roles():
    for role in ROLE_NAMES:
        assert validate_role(role) is True


def test_invalid_role():
    assert validate_role("Reader") is False
    assert validate_role("owner") is False


# ─── validate_resource_type ──────────────────────

def test_resource_types_are_case_insensitive():
    assert validate_resource_type("managementgroup") is True
    assert validate_resource_type("Subscription") is True


def test_invalid_resource_type():
    assert validate_resource_type("resourcegroup") is False


# ─── validate_request_length ─────────────────────

def test_valid_request_length():
    assert validate_request_length(1) is True
    assert validate_request_length(4) is True
    assert validate_request_length(8) is True


def test_invalid_request_length():
    assert validate_request_length(0) is False
    assert validate_request_length(9) is False


# ─── validate_activation_request ─────────────────

def test_activation_request_valid():
    ok, msg = _validate()
    assert ok is True
    assert msg == ""


def test_activation_request_missing_reason():
    ok, msg = _validate(reason="  ")
    assert ok is False
    assert "reason" in msg


def test_activation_request_bad_role():
    ok, msg = _validate(role="Global Administrator")
    assert ok is False
    assert "allow-list" in msg


def test_activation_request_bad_type():
    ok, msg = _validate(resource_type="tenant")
    assert ok is False
    assert "Type" in msg


def test_activation_request_length_not_integer():
    ok, msg = _validate(request_length=2.5)
    assert ok is False
    assert "whole number" in msg


def test_activation_request_length_out_of_range():
    ok, msg = _validate(request_length=12)
    assert ok is False
    assert "between 1 and 8" in msg


# ─── environment helpers ─────────────────────────

def test_optional_env_default(monkeypatch):
    monkeypatch.delenv("PIM_TENANT_ID", raising=False)
    assert get_optional_env("PIM_TENANT_ID", "common") == "common"
