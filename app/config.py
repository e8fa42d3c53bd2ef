import logging
import os

from pydantic import BaseModel, ConfigDict, field_validator


class Settings(BaseModel):
    """Configuração do processo: lida uma única vez do ambiente na inicialização."""

    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    host: str = "0.0.0.0"
    port: int = 3000
    upstream_timeout: float = 5.0
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _check_log_level(cls, v) -> str:
        # nível desconhecido não pode derrubar o processo: volta para INFO
        level = str(v or "").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            return "INFO"
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_key=os.getenv("ALPHA_VANTAGE_API_KEY", "").strip(),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            upstream_timeout=float(os.getenv("UPSTREAM_TIMEOUT", "5.0")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
