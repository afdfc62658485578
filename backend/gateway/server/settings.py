"""Gateway server configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class GatewayServerSettings(BaseSettings):
    model_config = {"env_prefix": "GATEWAY_"}

    log_dir: str | None = "backend/logs/gateway"
    # Requests slower than this are logged at WARNING
    slow_request_threshold_ms: int = Field(default=500, ge=1)
    # Deadline applied to every repository and health call made for a request
    request_timeout_seconds: float = Field(default=5.0, gt=0)
