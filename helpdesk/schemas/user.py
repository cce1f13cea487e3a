from pydantic import BaseModel, ConfigDict

from helpdesk.models.user import Role


class UserResponse(BaseModel):
    """User as exposed over the API; the password hash never leaves the store."""

    id: int
    username: str
    email: str
    role: Role

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str
