# app/utils/auth_utils.py
import jwt
from app.core.config import settings


def decode_token(token: str):
    """Verify signature and expiry. Raises ``jwt.PyJWTError`` on failure."""
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.ALGORITHM],
        options={"require": ["exp"]},
    )
