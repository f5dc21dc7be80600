"""Configuration schema using Pydantic.

Single data model and defaults for the server, persisted to ~/.ajaxrpc/config.json.
"""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerConfig(BaseModel):
    """HTTP binding configuration."""
    host: str = "127.0.0.1"
    port: int = 9001
    rpc_path: str = "/json"  # POST endpoint that accepts request envelopes
    index_enabled: bool = True  # Serve the demo page on GET /
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    """Loguru sink configuration."""
    level: str = "INFO"
    file_enabled: bool = False  # Also write a rotating file under ~/.ajaxrpc/logs
    rotation: str = "10 MB"
    retention: str = "14 days"


class Config(BaseSettings):
    """Root configuration for ajaxrpc."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def rpc_url(self) -> str:
        """URL clients should post to; wildcard binds map to loopback."""
        host = self.server.host
        if host in {"0.0.0.0", "::"}:
            host = "127.0.0.1"
        return f"http://{host}:{self.server.port}{self.server.rpc_path}"

    model_config = SettingsConfigDict(
        env_prefix="AJAXRPC_",
        env_nested_delimiter="__",
    )
