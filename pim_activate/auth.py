"""
PIM Activate - Sign-in & Session
---------------------------------
Builds the credential every Graph call is made with. The session object
is passed explicitly into the API client; nothing is kept in ambient
module state.

Two modes:
  • Interactive (default): browser sign-in hinted with the requested
    username, performed up-front so a failed sign-in aborts the run
    before any lookup.
  • Skip-login: no sign-in call is made. Tokens come lazily from the
    ambient credential chain (Azure CLI, environment variables,
    managed identity) when the first API call needs one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import jwt
from azure.core.exceptions import ClientAuthenticationError
from azure.identity import DefaultAzureCredential, InteractiveBrowserCredential

from .config import GRAPH_SCOPE
from .errors import AuthenticationError

logger = logging.getLogger("pim-activate.auth")


@dataclass
class PimSession:
    """Credential plus the identity it was opened for."""

    username: str
    credential: Any
    authenticated: bool = False

    def token(self) -> str:
        """Return a Graph access token, raising AuthenticationError on failure."""
        try:
            return self.credential.get_token(GRAPH_SCOPE).token
        except ClientAuthenticationError as exc:
            logger.debug("Token acquisition failed for %s: %s", self.username, exc.message)
            raise AuthenticationError(
                f"Could not obtain an access token for {self.username}: {exc.message}"
            ) from exc

    def close(self) -> None:
        close = getattr(self.credential, "close", None)
        if close is not None:
            close()


def open_session(
    username: str,
    skip_login: bool = False,
    tenant_id: str | None = None,
) -> PimSession:
    """
    Create the session for an activation run.

    Args:
        username: Principal name the role is activated for; used as the
                  sign-in hint.
        skip_login: Reuse the ambient credential chain instead of signing in.
        tenant_id: Directory to sign in to (interactive mode only).

    Returns:
        A PimSession ready to hand to PimClient.

    Raises:
        AuthenticationError: If interactive sign-in fails.
    """
    if skip_login:
        logger.info("Sign-in skipped - using the existing Azure credential chain.")
        return PimSession(username=username, credential=DefaultAzureCredential())

    kwargs: dict[str, Any] = {"login_hint": username}
    if tenant_id:
        kwargs["tenant_id"] = tenant_id
    credential = InteractiveBrowserCredential(**kwargs)

    try:
        credential.authenticate(scopes=[GRAPH_SCOPE])
        token = credential.get_token(GRAPH_SCOPE).token
    except ClientAuthenticationError as exc:
        logger.debug("Sign-in failed for %s: %s", username, exc.message)
        credential.close()
        raise AuthenticationError(f"Sign-in failed for {username}: {exc.message}") from exc

    signed_in = signed_in_principal(token)
    if signed_in and signed_in.lower() != username.lower():
        logger.warning(
            "Signed in as %s but activating for %s - the request may be rejected.",
            signed_in,
            username,
        )
    logger.info("Signed in - user=%s", signed_in or username)

    return PimSession(username=username, credential=credential, authenticated=True)


def signed_in_principal(token: str) -> str | None:
    """Read the principal name from an access token without verifying it."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        logger.debug("Access token is not a decodable JWT; skipping identity check.")
        return None
    return claims.get("upn") or claims.get("preferred_username")
