"""Member domain model."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Member(BaseModel):
    """Garden crew member. The phone number doubles as the login key."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Opaque member ID")
    name: str = Field(..., description="Display name")
    role: str = Field(..., description="Free-text job title (e.g., 'Gardener')")
    phone_number: str = Field(..., description="Unique login key")
    is_admin: bool = Field(default=False, description="Whether the member manages team and routines")
    avatar: str = Field(default="", description="Avatar image URL")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Strip surrounding whitespace and reject empty names."""
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        """Reject blank phone numbers."""
        v = v.strip()
        if not v:
            raise ValueError("Phone number is required")
        return v
