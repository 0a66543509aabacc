"""Bearer credential check shared by every route."""

from __future__ import annotations

import hmac
from typing import Annotated

from fastapi import Header, Request

from deedsync.domain.errors import Unauthorized


def _bearer_credential(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, credential = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return credential.strip() or None


def require_bearer(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Reject the request unless it carries the configured secret.

    Without a configured secret every request is rejected.
    """

    expected: str | None = request.app.state.api_token
    provided = _bearer_credential(authorization)
    if not expected or provided is None:
        raise Unauthorized("Missing or invalid bearer token")
    if not hmac.compare_digest(provided.encode(), expected.encode()):
        raise Unauthorized("Missing or invalid bearer token")
