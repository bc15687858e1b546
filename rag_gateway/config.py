import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rag_gateway.operations import Operation

DEFAULT_BACKEND_URL = "http://localhost:3000"


class GatewaySettings(BaseModel):
    """Process-wide configuration, read once from the environment."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    backend_url: str = Field(
        default_factory=lambda: os.getenv("BACKEND_URL") or DEFAULT_BACKEND_URL
    )
    search_timeout: float = Field(
        default_factory=lambda: os.getenv("SEARCH_TIMEOUT_SECONDS") or 20.0, gt=0
    )
    generation_timeout: float = Field(
        default_factory=lambda: os.getenv("GENERATION_TIMEOUT_SECONDS") or 30.0, gt=0
    )
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    @field_validator("backend_url")
    @classmethod
    def _strip_trailing_slashes(cls, value: str) -> str:
        return value.rstrip("/")

    def deadline_for(self, operation: Operation) -> float:
        if operation is Operation.SEARCH:
            return self.search_timeout
        return self.generation_timeout


@lru_cache(maxsize=1)
def get_settings() -> GatewaySettings:
    return GatewaySettings()


__all__ = ["DEFAULT_BACKEND_URL", "GatewaySettings", "get_settings"]
