"""Request/response schemas for auth and current-user endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class CurrentUser(BaseModel):
    """
    Authenticated user for dependency injection.

    Role, status and permissions come from the stored record, never from the
    snapshot embedded in the session credential.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    avatar: str | None = None
    role: str
    status: str
    discord_roles: list[str] = Field(default_factory=list)
    can_delete_columns: bool = True
    can_delete_cards: bool = True


class Permissions(BaseModel):
    """Editor delete rights; admins ignore them."""

    model_config = ConfigDict(populate_by_name=True)

    can_delete_columns: bool = Field(True, alias="canDeleteColumns")
    can_delete_cards: bool = Field(True, alias="canDeleteCards")


class MeResponse(BaseModel):
    """GET /users/me: credential identity merged with the freshly resolved role."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    avatar: str | None = None
    role: str
    status: str
    member_roles: list[str] = Field(default_factory=list, alias="memberRoles")
    in_guild: bool | None = Field(
        default=None,
        alias="inGuild",
        description="None when the live lookup failed and stored values were returned",
    )
    permissions: Permissions


class LogoutResponse(BaseModel):
    success: bool = True
