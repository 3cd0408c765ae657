"""
User Model

Represents a registered library user. Users authenticate with a username
and password; the password is only ever stored as a bcrypt hash.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.user_session import UserSession


class User(Base):
    """
    User model representing registered users in the system.

    Table: users

    Relationships:
    - sessions: One-to-Many with UserSession (deleted with the user)

    Indexes:
    - Primary key on id (automatic)
    - username: Unique index for login lookups

    Example:
        user = User(
            username="johndoe",
            hashed_password=hash_password("secret123"),
            email="john@example.com",
            first_name="John",
            family_name="Doe",
        )
    """

    __tablename__ = "users"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Authentication Fields
    # -------------------------------------------------------------------------
    # Signup checks for an existing username first; the unique index
    # catches two signups racing for the same name.
    username: Mapped[str] = mapped_column(
        String(18),
        unique=True,
        index=True,
        nullable=False,
        comment="Login name (6-18 characters)"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # -------------------------------------------------------------------------
    # Profile Fields
    # -------------------------------------------------------------------------
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="User's email address"
    )

    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    family_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the user registered"
    )

    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the user last logged in"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    sessions: Mapped[list["UserSession"]] = relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def name(self) -> str:
        return f"{self.family_name}, {self.first_name}"

    def __repr__(self) -> str:
        """Developer-friendly string representation."""
        return f"User(id={self.id}, username='{self.username}')"
