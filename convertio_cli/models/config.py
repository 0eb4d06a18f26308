"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, Field, field_validator

from convertio_cli.utils.path import normalize_format

DEFAULT_BASE_URL = "http://api.convertio.co/convert"
DEFAULT_POLL_INTERVAL = 2.0
# aiohttp's own default total timeout
DEFAULT_REQUEST_TIMEOUT = 300.0


class ConvertConfig(BaseModel):
    """A validated configuration model for the application."""

    # API
    api_key: str
    base_url: str = DEFAULT_BASE_URL

    # Polling
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    # Internal fields not loaded from INI file
    output_format: str = Field(default="", repr=False)
    input_files: list[str] = Field(default_factory=list, repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError(
                "API key is not configured. Run 'convertio-cli init <KEY>' or set "
                "CONVERTIO_API_KEY."
            )
        return v

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Base URL must be an http(s) URL, got: {v}")
        return v.rstrip("/")

    @field_validator("poll_interval")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        if v <= 0 or v > 60:
            raise ValueError("Poll interval must be greater than 0 and at most 60s.")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Request timeout must be greater than 0.")
        return v

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        return normalize_format(v)

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"output_format", "input_files"}
        return {key for key in cls.model_fields if key not in internal_fields}
