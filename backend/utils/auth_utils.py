from typing import Optional

from fastapi import Header, HTTPException, status


def get_forwarded_authorization(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """
    FastAPI dependency returning the caller's Authorization header.

    Tokens are validated by the Record Store, not here. Only a header that is not in
    the "Bearer <token>" or "Basic <credentials>" format is rejected.
    """
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() not in ("bearer", "basic"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )
    return authorization
