# auth.py
# Role gating for the API. Tokens are issued out of band and configured in core/config.py.

import secrets
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from schoolsports_backend.core.config import ADMIN_API_TOKEN, VIEWER_API_TOKEN

ROLE_ADMIN = "admin"
ROLE_VIEWER = "viewer"

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_role(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> str:
    """
    Resolve the caller's role from the Bearer token.
    - No token: 401
    - Unknown token: 403
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Access token required")

    token = credentials.credentials
    if ADMIN_API_TOKEN and secrets.compare_digest(token, ADMIN_API_TOKEN):
        return ROLE_ADMIN
    if VIEWER_API_TOKEN and secrets.compare_digest(token, VIEWER_API_TOKEN):
        return ROLE_VIEWER

    raise HTTPException(status_code=403, detail="Invalid token")


def require_admin(role: str = Depends(get_current_role)) -> str:
    if role != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Access denied. Administrators only.")
    return role
