from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class VerificationResult(BaseModel):
    """Body of ``GET /api/subscription/verify``."""

    status: Optional[str] = None
    access_token: Optional[str] = Field(None, validation_alias=AliasChoices("accessToken", "access_token"))
    message: Optional[str] = None

    model_config = {"extra": "ignore"}

    @property
    def is_success(self) -> bool:
        return (self.status or "").lower() == "success"
