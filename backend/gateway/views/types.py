from pydantic import BaseModel, Field, field_validator


class CredentialsRequest(BaseModel):
    """Body of POST /api/v1/players and POST /api/v1/login."""

    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=255)

    @field_validator("username", "password")
    @classmethod
    def _utf8_encodable(cls, value: str) -> str:
        value.encode("utf-8")
        return value
