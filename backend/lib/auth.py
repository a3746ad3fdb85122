"""
Authentication utilities for JWT validation
"""
import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import Header, HTTPException
from jose import JWTError, jwt

from .supabase_client import get_supabase_client

load_dotenv()
load_dotenv('../.env')

logger = logging.getLogger(__name__)

# Same secret Supabase signs access tokens with
JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")
JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = "authenticated"


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization header required")
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")
    return authorization[len("Bearer "):]


def decode_token(token: str, secret: str) -> Dict[str, Any]:
    """
    Verify a Supabase access token locally.

    Raises:
        HTTPException: 401 if the signature, expiry or audience is invalid
    """
    try:
        claims = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM], audience=JWT_AUDIENCE)
    except JWTError as e:
        logger.warning(f"⚠️ Rejected token: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    if not claims.get("sub"):
        raise HTTPException(status_code=401, detail="Token has no subject")
    return claims


async def get_current_user(authorization: Optional[str] = Header(None)) -> Dict[str, Any]:
    """
    Validate the bearer token and return user info.

    Tokens are verified locally when SUPABASE_JWT_SECRET is set; otherwise
    Supabase Auth is asked to resolve the token.

    Args:
        authorization: Bearer token from Authorization header

    Returns:
        dict: id, email, role

    Raises:
        HTTPException: If the token is missing or invalid
    """
    token = _bearer_token(authorization)

    if JWT_SECRET:
        claims = decode_token(token, JWT_SECRET)
        return {
            "id": claims["sub"],
            "email": claims.get("email"),
            "role": claims.get("role", "authenticated"),
        }

    try:
        user_response = get_supabase_client().auth.get_user(token)
        if not user_response or not user_response.user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")

        user = user_response.user
        return {
            "id": user.id,
            "email": user.email,
            "role": getattr(user, "role", None) or "authenticated",
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Auth error: {e}")
        raise HTTPException(status_code=401, detail="Could not validate credentials")
