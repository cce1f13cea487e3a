"""Pydantic schemas for registration, login and tokens."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from helpdesk.models.user import Role


class Identity(BaseModel):
    """The authenticated caller, as decoded from a bearer token."""

    user_id: int
    username: str
    email: str
    role: Role

    model_config = ConfigDict(frozen=True)


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("password", "secret")
    )
    # Any role is accepted, admin included: registration is open.
    role: Role
    email: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("password", "secret")
    )


class TokenResponse(BaseModel):
    access_token: str = Field(..., serialization_alias="accessToken")
    token_type: str = Field(default="bearer", serialization_alias="tokenType")
