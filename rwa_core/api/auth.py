"""
Identity and program dependencies

The authorizing identity of every request is the `sub` claim of an HS256
bearer token. With auth disabled (local development, tests) the identity
is taken verbatim from the X-RWA-Identity header.
"""

from datetime import datetime, timezone, timedelta
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import RwaConfig, get_config
from ..program import RwaTokenProgram

IDENTITY_HEADER = "X-RWA-Identity"

security = HTTPBearer(auto_error=False)

# Global program instance, created on first use
_program: Optional[RwaTokenProgram] = None


def get_settings() -> RwaConfig:
    return get_config()


def get_program() -> RwaTokenProgram:
    global _program
    if _program is None:
        _program = RwaTokenProgram()
    return _program


def issue_token(identity: str, settings: Optional[RwaConfig] = None) -> str:
    """Sign a bearer token asserting `identity`"""
    settings = settings or get_config()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": identity,
        "iat": now,
        "exp": now + timedelta(hours=settings.jwt_expiry_hours)
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_rwa_identity: Optional[str] = Header(None),
    settings: RwaConfig = Depends(get_settings)
) -> str:
    """Dependency that resolves the verified identity of the caller"""
    if not settings.auth_enabled:
        if not x_rwa_identity:
            raise HTTPException(status_code=401, detail=f"Missing {IDENTITY_HEADER} header")
        return x_rwa_identity

    if not credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = jwt.decode(credentials.credentials, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    identity = payload.get("sub")
    if not identity:
        raise HTTPException(status_code=401, detail="Invalid token")
    return identity
