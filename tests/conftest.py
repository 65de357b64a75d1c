"""Shared fakes: a Graph stand-in served through httpx.MockTransport and a static credential."""

from __future__ import annotations

import json

import httpx
import pytest
from azure.core.credentials import AccessToken

from pim_activate.auth import PimSession
from pim_activate.client import PIM_RESOURCES_PATH, USERS_PATH

USER = {"id": "user-0001", "userPrincipalName": "john.doe@contoso.com"}
RESOURCE = {"id": "res-0001", "type": "managementgroup", "displayName": "P-C00"}
ROLE = {"id": "roledef-0001", "displayName": "Contributor"}

RESOURCES_PATH = f"{PIM_RESOURCES_PATH}/resources"
REQUESTS_PATH = f"{PIM_RESOURCES_PATH}/roleAssignmentRequests"


class FakeCredential:
    def __init__(self, token: str = "fake-token") -> None:
        self.token = token
        self.closed = False

    def get_token(self, *scopes, **kwargs) -> AccessToken:
        return AccessToken(self.token, 4102444800)

    def close(self) -> None:
        self.closed = True


class FakeGraph:
    """Answers the four Graph calls from canned records and records what it saw."""

    def __init__(self, users=None, resources=None, roles=None, fail=None, raw=None, events=None):
        self.users = [USER] if users is None else users
        self.resources = [RESOURCE] if resources is None else resources
        self.roles = [ROLE] if roles is None else roles
        # path suffix -> (status, message)
        self.fail = fail or {}
        # path suffix -> verbatim body served with 200 text/html
        self.raw = raw or {}
        self.events = events if events is not None else []
        self.requests: list[httpx.Request] = []
        self.submitted: dict | None = None

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def filter_for(self, path: str) -> str:
        for request in self.requests:
            if request.url.path == path:
                return request.url.params["$filter"]
        raise AssertionError(f"no request to {path}")

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        self.events.append(path)

        for suffix, (status, message) in self.fail.items():
            if path.endswith(suffix):
                return httpx.Response(status, json={"error": {"code": "Error", "message": message}})
        for suffix, text in self.raw.items():
            if path.endswith(suffix):
                return httpx.Response(200, text=text, headers={"Content-Type": "text/html"})

        if path == USERS_PATH:
            return httpx.Response(200, json={"value": self.users})
        if path == RESOURCES_PATH:
            return httpx.Response(200, json={"value": self.resources})
        if path.endswith("/roleDefinitions"):
            return httpx.Response(200, json={"value": self.roles})
        if path == REQUESTS_PATH and request.method == "POST":
            self.submitted = json.loads(request.content)
            return httpx.Response(
                201, json={"id": "request-0001", "status": {"status": "Accepted"}, **self.submitted}
            )
        return httpx.Response(404, json={"error": {"code": "NotFound", "message": path}})


@pytest.fixture
def credential():
    return FakeCredential()


@pytest.fixture
def session(credential):
    return PimSession(username=USER["userPrincipalName"], credential=credential, authenticated=True)


@pytest.fixture
def graph():
    return FakeGraph()


@pytest.fixture
def make_graph():
    """Factory for a FakeGraph with overridden lookup results or failures."""
    return FakeGraph


@pytest.fixture
def user():
    return dict(USER)


@pytest.fixture
def resource():
    return dict(RESOURCE)


@pytest.fixture
def role():
    return dict(ROLE)


@pytest.fixture
def paths():
    """Graph paths the fake serves."""
    return {
        "users": USERS_PATH,
        "resources": RESOURCES_PATH,
        "role_definitions": f"{RESOURCES_PATH}/{RESOURCE['id']}/roleDefinitions",
        "requests": REQUESTS_PATH,
    }
