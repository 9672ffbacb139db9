from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# -------- USERS --------
class RegisterSchema(BaseModel):
    name: Optional[str] = None
    password: Optional[str] = None
    relation: Optional[str] = None


class LoginSchema(BaseModel):
    name: Optional[str] = None
    # Older front-ends post the name under "email"
    email: Optional[str] = None
    password: Optional[str] = None

    @property
    def identifier(self) -> Optional[str]:
        return self.name or self.email


class UserSummary(CamelModel):
    id: int
    name: str
    relation: str
    is_admin: bool = False
    created_at: datetime


# -------- SESSIONS --------
class SessionUser(CamelModel):
    id: int
    name: str
    relation: str
    is_admin: bool = False


class SessionRead(CamelModel):
    session_id: str
    user_id: int
    user: SessionUser
    expires_at: datetime


class MessageSchema(BaseModel):
    message: str
