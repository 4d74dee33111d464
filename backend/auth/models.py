from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

# bcrypt only hashes the first 72 bytes and newer releases refuse longer input.
BCRYPT_MAX_BYTES = 72


def _fits_bcrypt(value: str) -> str:
    if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"must be at most {BCRYPT_MAX_BYTES} bytes")
    return value


def _collapse_spaces(value: str) -> str:
    return " ".join(value.split())


Password = Annotated[str, AfterValidator(_fits_bcrypt)]
Username = Annotated[str, Field(min_length=3, max_length=50), AfterValidator(_collapse_spaces)]


class SignupRequest(BaseModel):
    username: Username
    password: Annotated[Password, Field(min_length=6)]
    display_name: str = Field(min_length=1, max_length=100)


class CredentialsRequest(BaseModel):
    username: str
    password: Password


class SessionTokenResponse(BaseModel):
    """Issued on signup and login. The same token is also set as the session cookie."""

    access_token: str
    token_type: str = "bearer"


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    display_name: str
    role: str
    created_at: Optional[datetime] = None
