from pydantic import AliasChoices, BaseModel, EmailStr, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

class UserBase(BaseModel):
    email: EmailStr
    first_name: str = ""
    last_name: str = ""

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

class UserCreate(UserBase):
    # The frontend posts camelCase names
    first_name: str = Field(default="", validation_alias=AliasChoices("firstName", "first_name"))
    last_name: str = Field(default="", validation_alias=AliasChoices("lastName", "last_name"))
    # bcrypt only looks at the first 72 bytes
    password: str = Field(min_length=6, max_length=72)

class User(UserBase):
    id: int
    phone: Optional[str] = None
    plan: str
    downloads_remaining: int
    expires_at: Optional[datetime] = None
    created_at: datetime

    # Pydantic v2 configuration
    model_config = ConfigDict(from_attributes=True)

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class TokenPair(Token):
    refresh_token: str

class RefreshRequest(BaseModel):
    refresh_token: str

class AuthResponse(TokenPair):
    user: User
