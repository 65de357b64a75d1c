"""
PIM Activate - Graph PIM Client
--------------------------------
Thin synchronous wrapper over the Microsoft Graph endpoints the
activation needs:

  GET  /v1.0/users                                           → directory users
  GET  /beta/privilegedAccess/azureResources/resources       → PIM-managed resources
  GET  .../resources/{id}/roleDefinitions                    → roles on a resource
  POST /beta/privilegedAccess/azureResources/roleAssignmentRequests

Lookups return the raw ``value`` list so callers decide what a count
mismatch means. HTTP failures and bodies that are not the expected JSON
shape surface as httpx exceptions.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .auth import PimSession
from .config import GRAPH_BASE_URL, HTTP_TIMEOUT_SECONDS
from .schedule import Schedule

logger = logging.getLogger("pim-activate.client")

USERS_PATH = "/v1.0/users"
PIM_RESOURCES_PATH = "/beta/privilegedAccess/azureResources"


def odata_literal(value: str) -> str:
    """Quote a string for an OData $filter expression."""
    return "'" + value.replace("'", "''") + "'"


def _json_object(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body; anything else surfaces as an httpx.DecodingError."""
    try:
        payload = response.json()
    except ValueError as exc:
        raise httpx.DecodingError(
            f"Response from {response.request.url.path} is not JSON", request=response.request
        ) from exc
    if not isinstance(payload, dict):
        raise httpx.DecodingError(
            f"Response from {response.request.url.path} is not a JSON object",
            request=response.request,
        )
    return payload


class PimClient:
    """Graph client bound to one PimSession."""

    def __init__(
        self,
        session: PimSession,
        base_url: str = GRAPH_BASE_URL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.session = session
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> "PimClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.session.token()}",
            "Content-Type": "application/json",
        }

    def _list(self, path: str, filter_expr: str) -> list[dict[str, Any]]:
        logger.debug("GET %s  $filter=%s", path, filter_expr)
        response = self._http.get(
            path, headers=self._headers(), params={"$filter": filter_expr}
        )
        response.raise_for_status()
        records = _json_object(response).get("value", [])
        if not isinstance(records, list) or not all(
            isinstance(record, dict) and "id" in record for record in records
        ):
            raise httpx.DecodingError(
                f"Unexpected record shape from {path}", request=response.request
            )
        return records

    # ──────────────────────────────────────────────
    # Lookups
    # ──────────────────────────────────────────────

    def find_users(self, principal_name: str) -> list[dict[str, Any]]:
        return self._list(
            USERS_PATH, f"userPrincipalName eq {odata_literal(principal_name)}"
        )

    def find_privileged_resources(
        self, resource_type: str, display_name: str
    ) -> list[dict[str, Any]]:
        """
        Query PIM resources by type and display name.

        The service compares both fields case-sensitively against its stored
        form: types are lower-case and names upper-case.
        """
        filter_expr = (
            f"type eq {odata_literal(resource_type.lower())} "
            f"and displayName eq {odata_literal(display_name.upper())}"
        )
        return self._list(f"{PIM_RESOURCES_PATH}/resources", filter_expr)

    def find_role_definitions(
        self, resource_id: str, role_name: str
    ) -> list[dict[str, Any]]:
        return self._list(
            f"{PIM_RESOURCES_PATH}/resources/{resource_id}/roleDefinitions",
            f"displayName eq {odata_literal(role_name)}",
        )

    # ──────────────────────────────────────────────
    # Activation
    # ──────────────────────────────────────────────

    def submit_activation_request(
        self,
        resource_id: str,
        subject_id: str,
        role_definition_id: str,
        schedule: Schedule,
        reason: str,
    ) -> dict[str, Any]:
        """
        Ask PIM to activate an eligible role assignment.

        Returns:
            The created roleAssignmentRequest record.
        """
        body = {
            "roleDefinitionId": role_definition_id,
            "resourceId": resource_id,
            "subjectId": subject_id,
            "assignmentState": "Active",
            "type": "UserAdd",
            "reason": reason,
            "schedule": schedule.to_dict(),
        }
        path = f"{PIM_RESOURCES_PATH}/roleAssignmentRequests"
        logger.debug("POST %s  body=%s", path, body)
        response = self._http.post(path, headers=self._headers(), json=body)
        response.raise_for_status()
        return _json_object(response)
