"""Security utilities: session tokens, password hashing, chore QR tokens."""

import hashlib
import secrets
from datetime import datetime

import bcrypt
import jwt

from familyhub.config import settings


# --- Password Hashing ---

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=settings.bcrypt_rounds)).decode()


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode(), hashed.encode())


# --- Session Tokens ---

def create_session_token(member_id: int, session_id: int, expires_at: datetime) -> str:
    payload = {
        "sub": str(member_id),
        "sid": session_id,
        "exp": expires_at,
        "type": "session",
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Decode and validate a session token. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


# --- Token Hash ---

def hash_token(token: str) -> str:
    """Hash a token for storage (not for password - just fingerprint)."""
    return hashlib.sha256(token.encode()).hexdigest()[:32]


# --- Chore QR ---

def generate_qr_token() -> str:
    return secrets.token_urlsafe(16)


def qr_payload(token: str) -> str:
    """Content encoded in the printed QR code; the mobile scanner strips the scheme."""
    return f"familyhub://chore/{token}"
