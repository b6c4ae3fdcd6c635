"""ORM model for website users (Discord identity, application role, approval)."""

from sqlalchemy import Boolean, Column, DateTime, String, func

from sakuraboard.models.base import Base, JSONText

ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_VIEWER = "viewer"
WEBSITE_ROLES = (ROLE_ADMIN, ROLE_EDITOR, ROLE_VIEWER)

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
APPROVAL_STATUSES = (STATUS_PENDING, STATUS_APPROVED)


class WebsiteUser(Base):
    """
    One row per Discord account that ever logged in.

    website_role: 'admin', 'editor' or 'viewer'
    status: 'pending' or 'approved'
    discord_roles: guild role ids last observed; advisory cache only.
    """

    __tablename__ = "website_users"

    user_id = Column(String(64), primary_key=True)
    username = Column(String(255), nullable=False)
    avatar = Column(String(255), nullable=True)
    website_role = Column(String(16), nullable=False, default=ROLE_VIEWER)
    status = Column(String(16), nullable=False, default=STATUS_PENDING)
    discord_roles = Column(JSONText(), nullable=True, default=list)
    can_delete_columns = Column(Boolean, nullable=False, default=True)
    can_delete_cards = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
