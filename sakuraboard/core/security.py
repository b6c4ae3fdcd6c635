"""Session credential issuance and verification (signed JWT, no server-side session table)."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import jwt

from sakuraboard.core.config import AccessConfig

if TYPE_CHECKING:
    from sakuraboard.models.user import WebsiteUser


@dataclass(frozen=True)
class IssuedSession:
    """A freshly signed credential plus what the cookie layer needs to know about it."""

    token: str
    expires_at: datetime
    persistent: bool


def issue_session_token(
    user: "WebsiteUser",
    stay_logged_in: bool,
    config: AccessConfig,
    now: datetime | None = None,
) -> IssuedSession:
    """
    Sign a session credential carrying identity plus the role/approval snapshot.

    The lifetime is chosen once here: the long-lived window when the user asked to
    stay logged in, otherwise the short default. There is no refresh or rotation;
    the embedded role snapshot is informational only.
    """
    now = now or datetime.now(UTC)
    lifetime = (
        config.session_long_lived_lifetime
        if stay_logged_in
        else config.session_default_lifetime
    )
    expire = now + lifetime
    payload: dict[str, Any] = {
        "sub": str(user.user_id),
        "username": user.username,
        "avatar": user.avatar,
        "role": user.website_role,
        "status": user.status,
        "memberRoles": list(user.discord_roles or []),
        "iat": now,
        "exp": expire,
    }
    token = jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)
    return IssuedSession(token=token, expires_at=expire, persistent=stay_logged_in)


def decode_session_token(token: str, config: AccessConfig) -> dict[str, Any]:
    """
    Decode and validate a session credential; return its payload.
    Raises jwt.PyJWTError on bad signature, malformed token or expiry.
    """
    return jwt.decode(
        token,
        config.jwt_secret,
        algorithms=[config.jwt_algorithm],
        options={"require": ["sub", "exp"]},
    )
