from jose import JWTError, jwt
from cabinshare.config import settings
from cabinshare.core.exceptions import UnauthorizedException
from cabinshare.models.current_user import CurrentUser


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using shared SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (user_id), 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")

    # Validate expiration (jose checks the value, not its presence)
    if payload.get("exp") is None:
        raise UnauthorizedException("Token missing expiration")

    # Extract user_id from 'sub' claim
    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedException("Token missing user identifier")

    return payload


def extract_current_user(token: str) -> CurrentUser:
    """Build the caller identity from a verified token"""
    payload = decode_jwt(token)
    return CurrentUser(user_id=payload["sub"], email=payload.get("email"))
