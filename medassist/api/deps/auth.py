"""
Bearer token authentication dependency.

Verifies the JWT issued by the identity service and resolves the caller's
user id. Identity management itself lives outside this service.

Dependencies: fastapi, python-jose, medassist.configs
System role: Caller identity resolution for every chatbot endpoint
"""

import logging

from fastapi import Depends, Header, HTTPException, status
from jose import ExpiredSignatureError, JWTError, jwt

from medassist.configs import Settings
from medassist.core.exceptions import AuthenticationError
from medassist.api.deps.dependencies import get_settings_dependency

logger = logging.getLogger(__name__)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": message, "error": AuthenticationError.code},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _get_token_from_header(authorization: str | None) -> str:
    """
    Extract the bearer token from an Authorization header value.

    Raises:
        HTTPException: 401 if the header is missing or not a bearer token
    """
    if not authorization:
        raise _unauthorized("Unauthorized")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Unauthorized")
    return token.strip()


def decode_user_id(token: str, settings: Settings) -> str:
    """
    Verify a token and return the user id it carries.

    Args:
        token: Encoded JWT
        settings: Application settings (secret, algorithm, claim name)

    Returns:
        str: User id from the configured claim, falling back to "sub"

    Raises:
        HTTPException: 401 "Session Expired" or "Invalid Token"
    """
    auth = settings.auth
    try:
        payload = jwt.decode(token, auth.secret_key, algorithms=[auth.algorithm])
    except ExpiredSignatureError:
        raise _unauthorized("Session Expired")
    except JWTError as e:
        logger.info("Rejected bearer token", extra={"error_type": type(e).__name__})
        raise _unauthorized("Invalid Token")

    user_id = payload.get(auth.user_id_claim) or payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid Token")
    return str(user_id)


async def get_current_user_id(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings_dependency),
) -> str:
    """
    Resolve the authenticated caller.

    Returns:
        str: Caller's user id

    Raises:
        HTTPException: 401 when the token is missing, expired or invalid
    """
    token = _get_token_from_header(authorization)
    return decode_user_id(token, settings)
