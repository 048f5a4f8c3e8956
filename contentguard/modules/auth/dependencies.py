from typing import Any

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import InvalidTokenError

from contentguard.core.config import settings

security = HTTPBearer()


async def get_current_user_id(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(dependency=security),
) -> str:
    """
    Return the user id (``sub`` claim) of a valid bearer token.

    Tokens are issued by the external identity provider and verified with
    ``JWT_SECRET``. The id is also stored on ``request.state`` for per-user rate limits.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials (token may be invalid or expired)",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload: Any = jwt.decode(
            jwt=credentials.credentials,
            key=settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False},
        )
    except InvalidTokenError:
        raise credentials_exception

    user_id: str | None = payload.get("sub")
    if not user_id:
        raise credentials_exception

    request.state.user_id = user_id
    return user_id
