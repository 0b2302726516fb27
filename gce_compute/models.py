from pydantic import BaseModel


class TokenResponse(BaseModel):
    access_token: str
    expires_in: int | None = None
    token_type: str = "Bearer"
