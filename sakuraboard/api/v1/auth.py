"""Discord OAuth login/logout and auth dependencies (get_current_user, require_admin, ...)."""

import logging
from typing import Annotated, Any
from urllib.parse import urlencode

import jwt
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sakuraboard.core.config import AccessConfig, Settings, get_access_config, get_settings
from sakuraboard.core.database import get_db
from sakuraboard.core.security import IssuedSession, decode_session_token, issue_session_token
from sakuraboard.models.user import ROLE_ADMIN
from sakuraboard.schemas.auth import CurrentUser, LogoutResponse
from sakuraboard.services import access_control, user_records
from sakuraboard.services.discord_client import DiscordApiError, DiscordClient
from sakuraboard.services.role_resolver import resolve_role

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

STATE_STAY = "stayIn"
STATE_NO_STAY = "noStay"
STATE_TUNER_SUFFIX = "_tuner"


def get_discord_client(
    settings: Annotated[Settings, Depends(get_settings)],
    config: Annotated[AccessConfig, Depends(get_access_config)],
) -> DiscordClient:
    """Dependency: Discord client built from settings and the access snapshot (overridden in tests)."""
    return DiscordClient.from_settings(settings, config)


def encode_login_state(stay_logged_in: bool, tuner: bool) -> str:
    state = STATE_STAY if stay_logged_in else STATE_NO_STAY
    return state + STATE_TUNER_SUFFIX if tuner else state


def parse_login_state(state: str | None) -> tuple[bool, bool]:
    """Return (stay_logged_in, tuner). Unknown or missing state means a short session."""
    raw = (state or "").strip()
    tuner = raw.endswith(STATE_TUNER_SUFFIX)
    if tuner:
        raw = raw[: -len(STATE_TUNER_SUFFIX)]
    return raw == STATE_STAY, tuner


def _set_session_cookie(
    response: Response,
    session: IssuedSession,
    settings: Settings,
    config: AccessConfig,
) -> None:
    """
    Set the credential as an HttpOnly cookie.

    Production serves the frontend from another site, so the cookie must be
    SameSite=None and Secure. Without "stay logged in" no Max-Age is sent and the
    browser drops it with the session.
    """
    prod = settings.APP_ENV == "prod"
    max_age = None
    if session.persistent:
        max_age = int(config.session_long_lived_lifetime.total_seconds())
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session.token,
        max_age=max_age,
        httponly=True,
        secure=prod,
        samesite="none" if prod else "lax",
        path="/",
    )


@router.get("/discord")
def login_with_discord(
    discord: Annotated[DiscordClient, Depends(get_discord_client)],
    stay_logged_in: Annotated[bool, Query(alias="stayLoggedIn")] = True,
    tuner: Annotated[bool, Query(alias="tuner")] = False,
) -> RedirectResponse:
    """Redirect the browser to Discord's authorize page."""
    return RedirectResponse(discord.authorize_url(encode_login_state(stay_logged_in, tuner)))


@router.get("/discord/callback")
async def discord_callback(
    db: Annotated[Session, Depends(get_db)],
    discord: Annotated[DiscordClient, Depends(get_discord_client)],
    config: Annotated[AccessConfig, Depends(get_access_config)],
    settings: Annotated[Settings, Depends(get_settings)],
    code: str | None = None,
    state: str | None = None,
) -> RedirectResponse:
    """
    Finish OAuth: exchange the code, resolve the guild role, upsert the user,
    issue the session credential.

    The credential is delivered twice: as an HttpOnly cookie and as a `token`
    query parameter on the frontend redirect, because cross-site cookies are
    often blocked. Any failure redirects with `?error=oauth_failed`.
    """
    if not code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No code provided")

    stay_logged_in, tuner = parse_login_state(state)
    frontend_url = (settings.TUNER_FRONTEND_URL if tuner else None) or settings.FRONTEND_URL

    try:
        access_token = await discord.exchange_code(code)
        identity = await discord.fetch_identity(access_token)
        try:
            await resolve_role(db, discord, config, identity.id, identity=identity)
        except DiscordApiError as e:
            # Lookup failed for a reason other than "not in guild": keep stored state.
            logger.warning(
                "Guild lookup failed during login; using stored role",
                extra={"user_id": identity.id, "reason": e.message[:200]},
            )
            user_records.upsert_identity(db, identity)
        user = user_records.get_user(db, identity.id)
        if user is None:
            raise DiscordApiError("User record missing after login.")
        session = issue_session_token(user, stay_logged_in, config)
    except (DiscordApiError, SQLAlchemyError) as e:
        db.rollback()
        logger.error(
            "OAuth callback failed",
            extra={"reason": (getattr(e, "message", None) or str(e))[:500]},
        )
        return RedirectResponse(f"{frontend_url}?{urlencode({'error': 'oauth_failed'})}")

    logger.info(
        "User logged in",
        extra={
            "user_id": user.user_id,
            "role": user.website_role,
            "status": user.status,
            "stay_logged_in": stay_logged_in,
        },
    )
    response = RedirectResponse(f"{frontend_url}?{urlencode({'token': session.token})}")
    _set_session_cookie(response, session, settings, config)
    return response


@router.post("/logout", response_model=LogoutResponse)
def logout(settings: Annotated[Settings, Depends(get_settings)]) -> Any:
    """Clear the session cookie. The client discards its stored copy itself."""
    prod = settings.APP_ENV == "prod"
    response = JSONResponse(LogoutResponse().model_dump())
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=prod,
        samesite="none" if prod else "lax",
    )
    return response


def get_session_payload(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    config: Annotated[AccessConfig, Depends(get_access_config)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any]:
    """
    Dependency: verified credential payload from the Bearer header or the cookie.
    Missing credential -> 401; present but invalid or expired -> 403.
    """
    token = credentials.credentials if credentials is not None else None
    if not token:
        token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_session_token(token, config)
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )


def get_current_user(
    payload: Annotated[dict[str, Any], Depends(get_session_payload)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Dependency: the caller as stored in website_users.

    Role, status and permissions are read from the database on every request;
    the role snapshot inside the credential is ignored. A rejected (deleted) user
    gets 401.
    """
    user_id = str(payload.get("sub") or "")
    user = user_records.get_user(db, user_id) if user_id else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return CurrentUser(
        id=user.user_id,
        username=user.username,
        avatar=user.avatar,
        role=user.website_role,
        status=user.status,
        discord_roles=list(user.discord_roles or []),
        can_delete_columns=bool(user.can_delete_columns),
        can_delete_cards=bool(user.can_delete_cards),
    )


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require stored role 'admin'. Raises 403 otherwise."""
    if current_user.role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


def require_approved(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require an approved account (board access)."""
    if not access_control.is_approved(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account awaiting approval",
        )
    return current_user


def require_editor(
    current_user: Annotated[CurrentUser, Depends(require_approved)],
) -> CurrentUser:
    """Dependency: approved editor or admin."""
    if not access_control.can_edit_board(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Editor access required",
        )
    return current_user
