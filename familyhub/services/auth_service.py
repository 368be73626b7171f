"""First-run setup and login session business logic."""

import logging
import random
import re
import time
from datetime import timedelta
from decimal import Decimal
from typing import Optional

from sqlmodel import Session, select

from familyhub.config import settings
from familyhub.models.member import PASTEL_COLORS, FamilyMember, UserSession
from familyhub.models.settings import AppSettings
from familyhub.utils.dt import as_utc, utcnow
from familyhub.utils.security import (
    create_session_token,
    decode_token,
    hash_password,
    hash_token,
    verify_password,
)

logger = logging.getLogger(__name__)


def setup_status(session: Session) -> dict:
    has_admin = session.exec(select(FamilyMember).where(FamilyMember.is_admin == True)).first() is not None  # noqa: E712
    has_member = session.exec(select(FamilyMember)).first() is not None
    return {
        "is_setup_complete": has_admin and has_member,
        "has_admin": has_admin,
        "has_family_member": has_member,
    }


def complete_setup(
    admin_name: str,
    password: str,
    currency: str,
    point_value: Decimal,
    session: Session,
) -> FamilyMember:
    """Create the settings row and the admin member. Raises ValueError if already done."""
    existing = session.exec(select(FamilyMember).where(FamilyMember.is_admin == True)).first()  # noqa: E712
    if existing:
        raise ValueError("Setup has already been completed")

    app_settings = session.exec(select(AppSettings)).first()
    if not app_settings:
        app_settings = AppSettings()
    app_settings.currency = currency.upper()
    app_settings.point_value = point_value
    session.add(app_settings)

    slug = re.sub(r"\s+", "-", admin_name.lower())
    seed = f"{slug}-{int(time.time() * 1000)}"
    admin = FamilyMember(
        name=admin_name,
        avatar_type="dicebear",
        avatar_value=seed,
        color=random.choice(PASTEL_COLORS),
        is_admin=True,
        password_hash=hash_password(password),
    )
    session.add(admin)
    session.commit()
    session.refresh(admin)

    logger.info("Setup completed, admin member %s created", admin.id)
    return admin


def login(
    member_id: int,
    password: str,
    device_name: Optional[str],
    session: Session,
) -> dict:
    """Verify a member's password and open a session.

    Returns the token and its expiry or raises ValueError.
    """
    member = session.get(FamilyMember, member_id)
    if not member:
        raise ValueError("User not found")
    if not member.password_hash:
        raise ValueError("Password not set for this user")
    if not verify_password(password, member.password_hash):
        logger.info("Failed login for member %s", member_id)
        raise ValueError("Invalid password")

    expires_at = utcnow() + timedelta(days=settings.session_expire_days)
    user_session = UserSession(
        family_member_id=member.id,
        device_name=device_name or "Unknown device",
        expires_at=expires_at,
    )
    session.add(user_session)
    session.flush()

    token = create_session_token(member.id, user_session.id, expires_at)
    user_session.token_hash = hash_token(token)
    session.commit()
    session.refresh(member)

    logger.info("Member %s logged in from %s", member.id, user_session.device_name)
    return {"token": token, "expires_at": expires_at, "member": member}


def resolve_session(token: str, session: Session) -> tuple[FamilyMember, UserSession]:
    """Map a bearer token to its member. Raises ValueError when invalid or expired."""
    try:
        payload = decode_token(token)
    except Exception:
        raise ValueError("Invalid or expired session")

    if payload.get("type") != "session":
        raise ValueError("Invalid token type")

    user_session = session.get(UserSession, payload.get("sid"))
    if not user_session or user_session.token_hash != hash_token(token):
        raise ValueError("Invalid or expired session")
    if as_utc(user_session.expires_at) <= utcnow():
        raise ValueError("Invalid or expired session")

    member = session.get(FamilyMember, user_session.family_member_id)
    if not member:
        raise ValueError("User not found")
    return member, user_session


def logout(user_session: UserSession, session: Session) -> None:
    session.delete(user_session)
    session.commit()
    logger.info("Session %s closed", user_session.id)


def change_password(member: FamilyMember, current_password: str, new_password: str, session: Session) -> None:
    if not member.password_hash or not verify_password(current_password, member.password_hash):
        raise ValueError("Invalid current password")
    member.password_hash = hash_password(new_password)
    member.updated_at = utcnow()
    session.add(member)
    session.commit()


def verify_admin_credential(credential: str, session: Session) -> FamilyMember:
    """Re-check the admin password before the settings screen unlocks.

    Raises LookupError when there is no admin yet, ValueError on a wrong password.
    """
    admin = session.exec(select(FamilyMember).where(FamilyMember.is_admin == True)).first()  # noqa: E712
    if not admin or not admin.password_hash:
        raise LookupError("Admin not configured")
    if not verify_password(credential, admin.password_hash):
        logger.info("Failed settings verification")
        raise ValueError("Invalid password")
    return admin
