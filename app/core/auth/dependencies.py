"""FastAPI dependencies for authentication."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.auth.identity import Caller, InvalidIdentity, caller_from_claims
from app.core.auth.jwt import decode_token
from app.core.exceptions import raise_unauthorized

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_caller(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Caller:
    """
    Resolve the caller from the ``Authorization: Bearer <token>`` header.

    The token's signature and expiry are the only checks; role and activation
    changes take effect when the token is reissued.

    Raises:
        APIException: 401 AUTH_INVALID_TOKEN if the header is missing,
            malformed, expired, or carries inconsistent claims.
    """
    if credentials is None or not credentials.credentials:
        raise_unauthorized("AUTH_INVALID_TOKEN", "Access denied. No token provided.")

    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("type") != "access":
        raise_unauthorized("AUTH_INVALID_TOKEN", "Invalid token.")

    try:
        return caller_from_claims(payload)
    except InvalidIdentity:
        raise_unauthorized("AUTH_INVALID_TOKEN", "Invalid token.")


CurrentCaller = Annotated[Caller, Depends(get_current_caller)]
