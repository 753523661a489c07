"""Application configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the application.
"""

import logging
from pathlib import Path

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Case.dev API (format conversion, LLM, vaults)
    case_api_key: str = Field(
        default="",
        description="Bearer key for Case.dev. Empty disables every remote service.",
    )
    case_api_base_url: str = Field(
        default="https://api.case.dev",
        description="Base URL of the Case.dev API.",
    )
    request_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout applied to outbound HTTP calls.",
    )

    # Natural-language extraction
    llm_model: str = Field(
        default="openai/gpt-4o",
        description="Chat model used to extract template variables from prose.",
    )
    llm_temperature: float = Field(
        default=0.0,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for extraction.",
    )
    llm_max_tokens: int = Field(
        default=4096,
        gt=0,
        description="Completion token budget for extraction.",
    )

    # Storage
    storage_backend: str = Field(
        default="local",
        description="Document store to use: 'local' or 'vault'.",
    )
    local_store_dir: Path = Field(
        default=Path("./data/documents"),
        description="Directory holding LocalStore JSON records.",
    )
    vault_id: str | None = Field(
        default=None,
        description="Vault to store documents in. Discovered or created when unset.",
    )

    # Template engine
    max_template_depth: int = Field(
        default=64,
        ge=1,
        le=256,
        description="Maximum nesting of conditional blocks in a template body.",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_json: bool = Field(
        default=True,
        description="Render structlog events as JSON; false gives console-friendly key=value lines.",
    )

    @field_validator("local_store_dir")
    @classmethod
    def ensure_local_store_dir(cls, v: Path) -> Path:
        """Ensure the local store directory exists."""
        v.mkdir(parents=True, exist_ok=True)
        return v.resolve()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("storage_backend")
    @classmethod
    def normalize_storage_backend(cls, v: str) -> str:
        """Normalize the storage backend name."""
        return v.strip().lower()

    @field_validator("case_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Drop a trailing slash so paths can be appended directly."""
        return v.rstrip("/")

    @property
    def remote_enabled(self) -> bool:
        """Whether a Case.dev key is configured."""
        return bool(self.case_api_key.strip())

    def structlog_processors(self) -> list:
        """Processor chain for structlog, ending in the configured renderer."""
        renderer = (
            structlog.processors.JSONRenderer()
            if self.log_json
            else structlog.dev.ConsoleRenderer(colors=False)
        )
        return [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ]

    def configure_logging(self) -> None:
        """Route structlog through stdlib logging at the configured level."""
        level = getattr(logging, self.log_level, logging.INFO)

        structlog.configure(
            processors=self.structlog_processors(),
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", level=level)
        logging.getLogger("docstudio").setLevel(level)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
    return _settings
