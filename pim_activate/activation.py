"""
PIM Activate - Activation Driver
---------------------------------
Runs the activation as a strict sequence; the first failing step aborts
the run and nothing after it is attempted.

  1. Sign in (unless skipped)
  2. Resolve the user by principal name
  3. Resolve the PIM resource by type + display name
  4. Build the one-time schedule
  5. Resolve the role definition on that resource
  6. Submit the "UserAdd" / "Active" assignment request

Each lookup must yield exactly one record. Zero or several records are
reported the same way as a failed HTTP call: logged, then raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

import httpx

from .auth import open_session
from .client import PimClient
from .config import DEFAULT_REQUEST_HOURS, validate_activation_request
from .errors import PimLookupError, SubmissionError, ValidationError
from .schedule import Schedule, build_schedule

logger = logging.getLogger("pim-activate.activation")


@dataclass(frozen=True)
class ActivationRequest:
    username: str
    resource_type: str
    resource_name: str
    role: str
    reason: str
    request_length: int = DEFAULT_REQUEST_HOURS

    def validate(self) -> None:
        ok, error_msg = validate_activation_request(
            username=self.username,
            resource_type=self.resource_type,
            resource_name=self.resource_name,
            role=self.role,
            reason=self.reason,
            request_length=self.request_length,
        )
        if not ok:
            raise ValidationError(error_msg)


def service_detail(exc: httpx.HTTPError) -> str:
    """Best-effort human-readable detail from an httpx failure."""
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        try:
            message = response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            message = response.text or response.reason_phrase
        return f"HTTP {response.status_code}: {message}"
    return f"{type(exc).__name__}: {exc}"


def expect_single(records: list[dict[str, Any]], step: str, description: str) -> dict[str, Any]:
    """Return the only record, or raise PimLookupError tagged not_found / ambiguous."""
    if len(records) == 1:
        return records[0]

    kind = PimLookupError.NOT_FOUND if not records else PimLookupError.AMBIGUOUS
    logger.debug("%s - expected exactly 1 match, got %d", description, len(records))
    raise PimLookupError(
        f"{description}: expected exactly 1 match, got {len(records)}",
        step=step,
        kind=kind,
        count=len(records),
    )


def _lookup(
    step: str,
    description: str,
    fetch: Callable[[], list[dict[str, Any]]],
) -> dict[str, Any]:
    try:
        records = fetch()
    except httpx.HTTPError as exc:
        detail = service_detail(exc)
        logger.debug("%s - lookup failed: %s", description, detail)
        raise PimLookupError(
            f"{description}: lookup failed - {detail}",
            step=step,
            kind=PimLookupError.REQUEST_FAILED,
        ) from exc
    return expect_single(records, step, description)


# ──────────────────────────────────────────────
# Steps
# ──────────────────────────────────────────────

def resolve_user(client: PimClient, username: str) -> dict[str, Any]:
    user = _lookup(
        "resolve-user",
        f"User '{username}'",
        lambda: client.find_users(username),
    )
    logger.info("User resolved - upn=%s  id=%s", username, user["id"])
    return user


def resolve_resource(client: PimClient, resource_type: str, resource_name: str) -> dict[str, Any]:
    resource = _lookup(
        "resolve-resource",
        f"Resource {resource_type.lower()} '{resource_name.upper()}'",
        lambda: client.find_privileged_resources(resource_type, resource_name),
    )
    logger.info(
        "Resource resolved - type=%s  name=%s  id=%s",
        resource_type.lower(),
        resource.get("displayName", resource_name),
        resource["id"],
    )
    return resource


def resolve_role_definition(client: PimClient, resource_id: str, role: str) -> dict[str, Any]:
    role_definition = _lookup(
        "resolve-role",
        f"Role '{role}' on resource {resource_id}",
        lambda: client.find_role_definitions(resource_id, role),
    )
    logger.info("Role resolved - role=%s  id=%s", role, role_definition["id"])
    return role_definition


def submit_activation(
    client: PimClient,
    resource_id: str,
    subject_id: str,
    role_definition_id: str,
    schedule: Schedule,
    reason: str,
) -> dict[str, Any]:
    try:
        result = client.submit_activation_request(
            resource_id=resource_id,
            subject_id=subject_id,
            role_definition_id=role_definition_id,
            schedule=schedule,
            reason=reason,
        )
    except httpx.HTTPError as exc:
        detail = service_detail(exc)
        logger.debug("Activation request failed: %s", detail)
        raise SubmissionError(f"Activation request failed - {detail}") from exc

    logger.info(
        "Activation submitted - subject=%s  role=%s  resource=%s  until=%s  request=%s",
        subject_id,
        role_definition_id,
        resource_id,
        schedule.to_dict()["endDateTime"],
        result.get("id", "?"),
    )
    return result


def activate_role(
    request: ActivationRequest,
    client: PimClient,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Run steps 2-6 against an already-open client.

    Returns:
        The roleAssignmentRequest record created by the service.
    """
    request.validate()

    user = resolve_user(client, request.username)
    resource = resolve_resource(client, request.resource_type, request.resource_name)
    schedule = build_schedule(request.request_length, now=now)
    role_definition = resolve_role_definition(client, resource["id"], request.role)

    return submit_activation(
        client,
        resource_id=resource["id"],
        subject_id=user["id"],
        role_definition_id=role_definition["id"],
        schedule=schedule,
        reason=request.reason,
    )


def run_activation(
    request: ActivationRequest,
    skip_login: bool = False,
    tenant_id: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> dict[str, Any]:
    """
    Full run: validate, sign in, then activate.

    Input is validated before the credential is created so a bad request
    never reaches the network.
    """
    request.validate()

    session = open_session(request.username, skip_login=skip_login, tenant_id=tenant_id)
    try:
        with PimClient(session, transport=transport) as client:
            return activate_role(request, client)
    finally:
        session.close()
