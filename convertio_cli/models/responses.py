"""
Pydantic models for the JSON bodies returned by the Convertio API.
"""

from typing import Any

from pydantic import BaseModel, field_validator

SUCCESS_CODE = 200


class ConversionData(BaseModel):
    id: str
    step: str | None = None
    step_percent: int = 0

    @field_validator("step_percent", mode="before")
    @classmethod
    def coerce_percent(cls, v: Any) -> int:
        """
        The service sometimes sends an empty string or null instead of a number;
        anything that is not a whole number is treated as 0.
        """
        if isinstance(v, bool):
            return 0
        if isinstance(v, (int, float)):
            return int(v)
        if isinstance(v, str):
            try:
                return int(float(v.strip()))
            except ValueError:
                return 0
        return 0


class ApiResponse(BaseModel):
    """Response to the create and status calls."""

    code: int
    error: str | None = None
    data: ConversionData | None = None

    @property
    def ok(self) -> bool:
        return self.code == SUCCESS_CODE

    @property
    def error_message(self) -> str:
        return self.error or f"Conversion service returned code {self.code}."


class DownloadData(BaseModel):
    content: str


class DownloadResponse(BaseModel):
    """Response to the base64 download call."""

    code: int
    error: str | None = None
    data: DownloadData | None = None

    @property
    def ok(self) -> bool:
        return self.code == SUCCESS_CODE

    @property
    def error_message(self) -> str:
        return self.error or f"Conversion service returned code {self.code}."
