# This project was developed with assistance from AI tools.
"""Authentication and authorization schemas."""

from db.enums import ProfileStatus, UserRole
from pydantic import BaseModel, ConfigDict, Field


class DataScope(BaseModel):
    """Data visibility rules injected by the authorization gate."""

    own_data_only: bool = False
    user_id: str | None = None
    full_pipeline: bool = False


class UserContext(BaseModel):
    """Caller identity passed explicitly into every service operation."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: UserRole
    email: str = ""
    name: str = ""
    profile_status: ProfileStatus | None = None
    data_scope: DataScope = Field(default_factory=DataScope)


class TokenPayload(BaseModel):
    """Decoded JWT claims issued by the auth provider."""

    sub: str
    email: str | None = None
    role: str | None = None
    user_metadata: dict | None = None
