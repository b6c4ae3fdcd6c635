"""Discord REST client: OAuth code exchange, identity, guild membership and moderation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, urlencode

import httpx

if TYPE_CHECKING:
    from sakuraboard.core.config import AccessConfig, Settings

logger = logging.getLogger(__name__)

# Discord caps list-guild-members pages at 1000.
GUILD_MEMBERS_PAGE_LIMIT = 1000
# Discord rejects timeouts longer than 28 days.
MAX_TIMEOUT_MINUTES = 28 * 24 * 60
MAX_AUDIT_LOG_REASON_LEN = 512
OAUTH_SCOPES = ("identify", "guilds")
# JSON error codes on a 404 that mean the user is not a member (not a bad guild id).
UNKNOWN_MEMBER_CODES = frozenset({10007, 10013})


class DiscordApiError(Exception):
    """Raised when a Discord call fails (network, rate limit, auth, 5xx)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DiscordNotFoundError(DiscordApiError):
    """Raised only when Discord answers Unknown Member or Unknown User (confirmed guild absence)."""


@dataclass(frozen=True)
class DiscordIdentity:
    """The OAuth user as returned by /users/@me."""

    id: str
    username: str
    avatar: str | None


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
        detail = body.get("message") or str(body)
    except Exception:
        detail = resp.text[:500] if resp.text else "Unknown error"
    return detail[:500]


def _error_code(resp: httpx.Response) -> int | None:
    try:
        body = resp.json()
    except ValueError:
        return None
    return body.get("code") if isinstance(body, dict) else None


def _raise_for_status(resp: httpx.Response, what: str) -> None:
    if resp.status_code == 404:
        if _error_code(resp) in UNKNOWN_MEMBER_CODES:
            raise DiscordNotFoundError(f"{what}: not found.", 404)
        raise DiscordApiError(
            f"{what}: Discord returned 404: {_error_detail(resp)}",
            404,
        )
    if resp.status_code == 401:
        raise DiscordApiError(f"{what}: Discord rejected the credentials.", 401)
    if resp.status_code == 429:
        raise DiscordApiError(f"{what}: rate limited by Discord.", 429)
    if resp.status_code >= 400:
        raise DiscordApiError(
            f"{what}: Discord returned {resp.status_code}: {_error_detail(resp)}",
            resp.status_code,
        )


def _json(resp: httpx.Response, what: str, expected: type = dict) -> Any:
    """Decode a 2xx body; anything that is not the expected JSON shape is a failed call."""
    try:
        body = resp.json()
    except ValueError as e:
        raise DiscordApiError(f"{what}: Discord returned a non-JSON body.", resp.status_code) from e
    if not isinstance(body, expected):
        raise DiscordApiError(f"{what}: unexpected response shape.", resp.status_code)
    return body


def _audit_headers(reason: str | None) -> dict[str, str]:
    if not reason or not reason.strip():
        return {}
    return {"X-Audit-Log-Reason": quote(reason.strip()[:MAX_AUDIT_LOG_REASON_LEN])}


class DiscordClient:
    """
    Thin async wrapper over the Discord REST API.

    Guild lookups and moderation use the bot token (a privileged service
    credential), never the user's own OAuth token.
    """

    def __init__(
        self,
        base_url: str,
        client_id: str,
        client_secret: str,
        bot_token: str,
        guild_id: str,
        redirect_uri: str,
        timeout: float = 15.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.bot_token = bot_token
        self.guild_id = guild_id
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings, access: AccessConfig) -> DiscordClient:
        """OAuth app details from settings; bot token and guild id from the access snapshot."""
        return cls(
            base_url=settings.DISCORD_API_BASE_URL,
            client_id=settings.DISCORD_CLIENT_ID,
            client_secret=settings.DISCORD_CLIENT_SECRET.get_secret_value(),
            bot_token=access.bot_token,
            guild_id=access.guild_id,
            redirect_uri=settings.OAUTH_REDIRECT_URI,
            timeout=settings.DISCORD_REQUEST_TIMEOUT_SEC,
        )

    def _bot_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bot {self.bot_token}"}

    def _guild_path(self) -> str:
        if not self.guild_id:
            raise DiscordApiError("Discord guild id is not configured.")
        return f"/guilds/{self.guild_id}"

    async def _send(
        self,
        method: str,
        path: str,
        what: str,
        **kwargs: Any,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.request(method, url, timeout=self.timeout, **kwargs)
        except httpx.TimeoutException as e:
            raise DiscordApiError(f"{what}: Discord timed out.") from e
        except httpx.HTTPError as e:
            raise DiscordApiError(f"{what}: Discord unreachable ({e!s}).") from e
        _raise_for_status(resp, what)
        return resp

    def authorize_url(self, state: str) -> str:
        """Build the OAuth authorize URL the browser is redirected to."""
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": " ".join(OAUTH_SCOPES),
                "state": state,
            }
        )
        return f"{self.base_url}/oauth2/authorize?{query}"

    async def exchange_code(self, code: str) -> str:
        """Exchange an OAuth authorization code for the user's access token."""
        resp = await self._send(
            "POST",
            "/oauth2/token",
            "Token exchange",
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        access_token = _json(resp, "Token exchange").get("access_token")
        if not access_token:
            raise DiscordApiError("Token exchange: response missing access_token.")
        return access_token

    async def fetch_identity(self, access_token: str) -> DiscordIdentity:
        """Return the user behind an OAuth access token."""
        resp = await self._send(
            "GET",
            "/users/@me",
            "Identity lookup",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        data = _json(resp, "Identity lookup")
        if not data.get("id"):
            raise DiscordApiError("Identity lookup: response missing user id.")
        return DiscordIdentity(
            id=str(data["id"]),
            username=data.get("global_name") or data.get("username") or str(data["id"]),
            avatar=data.get("avatar"),
        )

    async def fetch_member_roles(self, user_id: str) -> list[str]:
        """
        Return the guild role ids of a member.
        Raises DiscordNotFoundError when the user is not in the guild.
        """
        resp = await self._send(
            "GET",
            f"{self._guild_path()}/members/{user_id}",
            "Guild member lookup",
            headers=self._bot_headers(),
        )
        return [str(r) for r in (_json(resp, "Guild member lookup").get("roles") or [])]

    async def list_guild_members(self) -> list[dict[str, Any]]:
        """Fetch every guild member, following the `after` cursor 1000 at a time."""
        members: list[dict[str, Any]] = []
        after = "0"
        while True:
            resp = await self._send(
                "GET",
                f"{self._guild_path()}/members",
                "Guild member list",
                headers=self._bot_headers(),
                params={"limit": GUILD_MEMBERS_PAGE_LIMIT, "after": after},
            )
            page = _json(resp, "Guild member list", expected=list)
            members.extend(page)
            if len(page) < GUILD_MEMBERS_PAGE_LIMIT:
                break
            after = str(page[-1]["user"]["id"])
        return members

    async def timeout_member(
        self,
        user_id: str,
        minutes: int,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> datetime:
        """Time out a member for `minutes`; returns the moment the timeout ends."""
        if minutes < 1 or minutes > MAX_TIMEOUT_MINUTES:
            raise ValueError(f"Timeout must be between 1 and {MAX_TIMEOUT_MINUTES} minutes.")
        until = (now or datetime.now(UTC)) + timedelta(minutes=minutes)
        await self._send(
            "PATCH",
            f"{self._guild_path()}/members/{user_id}",
            "Member timeout",
            headers={**self._bot_headers(), **_audit_headers(reason)},
            json={"communication_disabled_until": until.isoformat()},
        )
        return until

    async def kick_member(self, user_id: str, reason: str | None = None) -> None:
        await self._send(
            "DELETE",
            f"{self._guild_path()}/members/{user_id}",
            "Member kick",
            headers={**self._bot_headers(), **_audit_headers(reason)},
        )

    async def ban_member(
        self,
        user_id: str,
        reason: str | None = None,
        delete_message_seconds: int = 0,
    ) -> None:
        await self._send(
            "PUT",
            f"{self._guild_path()}/bans/{user_id}",
            "Member ban",
            headers={**self._bot_headers(), **_audit_headers(reason)},
            json={"delete_message_seconds": delete_message_seconds},
        )
