from uuid import UUID

from pydantic import BaseModel, Field

from deltaiota.core.db import MongoModel


class User(MongoModel):
    """User domain model with credentials."""

    username: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    password_hash: str  # bcrypt hash


class UserInput(BaseModel):
    """Writable user fields, as submitted on create and full update.

    Fields default to empty so that missing values are reported by the
    validators as empty fields rather than as schema errors.
    """

    username: str = Field("", description="Unique login name")
    first_name: str = Field("", description="First name")
    last_name: str = Field("", description="Last name")
    email: str = Field("", description="Contact email address")
    phone: str = Field("", description="Contact phone number (optional)")
    password: str = Field("", description="Plaintext password, hashed before storage")


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field(..., description="Email address")
    phone: str = Field(..., description="Phone number")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(
            id=user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone=user.phone,
        )
