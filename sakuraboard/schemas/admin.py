"""Schemas for admin endpoints: user management, guild members, moderation."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UserListItem(BaseModel):
    """Website user as shown in the admin panel."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    username: str
    avatar: str | None = None
    website_role: str
    status: str
    discord_roles: list[str] = Field(default_factory=list)
    can_delete_columns: bool
    can_delete_cards: bool
    created_at: datetime | None = None


class UserUpdateRequest(BaseModel):
    """Approve a user / change role. Admin is accepted only after live re-validation."""

    model_config = ConfigDict(extra="forbid")

    status: Literal["pending", "approved"]
    website_role: Literal["admin", "editor", "viewer"]
    can_delete_columns: bool | None = None
    can_delete_cards: bool | None = None


class SuccessResponse(BaseModel):
    success: bool = True


class VerificationSummary(BaseModel):
    """Result of a verify-all batch: continue-on-error counts."""

    checked: int = 0
    updated: int = 0
    errors: int = 0


class GuildMember(BaseModel):
    """Condensed guild member from the Discord member list."""

    id: str
    username: str
    global_name: str | None = None
    nick: str | None = None
    avatar: str | None = None
    roles: list[str] = Field(default_factory=list)
    joined_at: str | None = None
    bot: bool = False


class GuildMembersResponse(BaseModel):
    members: list[GuildMember]
    count: int


class TimeoutRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    minutes: int = Field(..., ge=1, le=40320, description="Timeout length (max 28 days)")
    reason: str | None = Field(default=None, max_length=512)


class KickRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: str | None = Field(default=None, max_length=512)


class BanRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: str | None = Field(default=None, max_length=512)
    delete_message_seconds: int = Field(default=0, ge=0, le=604800)


class ModerationResponse(BaseModel):
    success: bool = True
    action: Literal["timeout", "kick", "ban"]
    user_id: str
    until: datetime | None = None
