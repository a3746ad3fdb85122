"""
Unit Tests for Backend Authentication

Tests local Supabase JWT verification.
"""

import time
import pytest
import sys
import os

from fastapi import HTTPException
from jose import jwt

# Add backend to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "backend"))

from lib.auth import JWT_ALGORITHM, _bearer_token, decode_token

SECRET = "test-secret"


def make_token(secret=SECRET, **claims):
    payload = {"sub": "user-1", "aud": "authenticated", "email": "a@example.com", "exp": int(time.time()) + 60}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


class TestDecodeToken:
    """Test suite for local JWT verification."""

    def test_valid_token(self):
        """Test a well-formed token yields its claims."""
        claims = decode_token(make_token(), SECRET)
        assert claims["sub"] == "user-1"
        assert claims["email"] == "a@example.com"

    @pytest.mark.parametrize("token", [
        make_token(secret="other-secret"),
        make_token(exp=int(time.time()) - 10),
        make_token(aud="anon"),
        "not-a-jwt",
    ])
    def test_invalid_tokens_are_401(self, token):
        """Test bad signatures, expiry, audience and garbage map to 401."""
        with pytest.raises(HTTPException) as exc:
            decode_token(token, SECRET)
        assert exc.value.status_code == 401

    def test_missing_subject(self):
        """Test a token without a subject is rejected."""
        with pytest.raises(HTTPException):
            decode_token(make_token(sub=""), SECRET)


class TestBearerToken:
    """Test suite for Authorization header parsing."""

    def test_extracts_token(self):
        """Test the bearer prefix is stripped."""
        assert _bearer_token("Bearer abc.def") == "abc.def"

    @pytest.mark.parametrize("header", [None, "", "Token abc"])
    def test_rejects_bad_headers(self, header):
        """Test missing or non-bearer headers map to 401."""
        with pytest.raises(HTTPException) as exc:
            _bearer_token(header)
        assert exc.value.status_code == 401
