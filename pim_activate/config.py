"""
PIM Activate - Configuration & Constants
-----------------------------------------
Centralises environment variable loading, the role / resource-type
allow-lists and the input validation helpers so every module shares
one source of truth.
"""

from __future__ import annotations

import os
from typing import Final

# ──────────────────────────────────────────────
# Allow-lists
# ──────────────────────────────────────────────
ROLE_NAMES: Final[tuple[str, ...]] = ("Contributor", "Owner")

RESOURCE_TYPES: Final[tuple[str, ...]] = ("managementgroup", "subscription")

# Activation window (hours)
MIN_REQUEST_HOURS: Final[int] = 1
MAX_REQUEST_HOURS: Final[int] = 8
DEFAULT_REQUEST_HOURS: Final[int] = 8

# ──────────────────────────────────────────────
# Service endpoints
# ──────────────────────────────────────────────
GRAPH_BASE_URL: Final[str] = os.getenv(
    "PIM_GRAPH_BASE_URL", "https://graph.microsoft.com"
).rstrip("/")
GRAPH_SCOPE: Final[str] = "https://graph.microsoft.com/.default"
HTTP_TIMEOUT_SECONDS: Final[float] = float(os.getenv("PIM_HTTP_TIMEOUT", "30"))


def get_optional_env(key: str, default: str = "") -> str:
    """Return an environment variable with a fallback."""
    return os.getenv(key, default)


# ──────────────────────────────────────────────
# Validation helpers
# ──────────────────────────────────────────────

def validate_role(role_name: str) -> bool:
    """Check role name is in the allow-list."""
    return role_name in ROLE_NAMES


def validate_resource_type(resource_type: str) -> bool:
    """Resource types are matched case-insensitively."""
    return resource_type.lower() in RESOURCE_TYPES


def validate_request_length(hours: int) -> bool:
    """Ensure the activation window is within bounds."""
    return MIN_REQUEST_HOURS <= hours <= MAX_REQUEST_HOURS


def validate_activation_request(
    username: str,
    resource_type: str,
    resource_name: str,
    role: str,
    reason: str,
    request_length: int,
) -> tuple[bool, str]:
    """Validate activation inputs. Returns (ok, error_message)."""
    required = {
        "username": username,
        "type": resource_type,
        "name": resource_name,
        "role": role,
        "reason": reason,
    }
    for field, value in required.items():
        if not value or not value.strip():
            return False, f"Missing required value: {field}"

    if not validate_resource_type(resource_type):
        allowed = ", ".join(RESOURCE_TYPES)
        return False, f"Type '{resource_type}' is not supported. Allowed: {allowed}"

    if not validate_role(role):
        allowed = ", ".join(ROLE_NAMES)
        return False, f"Role '{role}' not in allow-list. Allowed: {allowed}"

    if isinstance(request_length, bool) or not isinstance(request_length, int):
        return False, "request_length must be a whole number of hours."

    if not validate_request_length(request_length):
        return False, (
            f"request_length must be between {MIN_REQUEST_HOURS} "
            f"and {MAX_REQUEST_HOURS} hours."
        )

    return True, ""
