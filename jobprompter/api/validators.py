"""Pydantic validators for Job Prompter API requests."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


VALID_TYPES = {"json", "xml"}


class TriggerImportRequest(BaseModel):
    """Request model for starting a manual import."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    api_name: str = Field(..., alias="apiName", min_length=1, description="Feed display name")
    api_url: str = Field(..., alias="apiUrl", min_length=1, description="Feed URL")
    type: str = Field(..., description="Feed format")

    @field_validator('api_url')
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate the feed URL scheme."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError("API URL must start with http:// or https://")
        return v

    @field_validator('type')
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Validate feed format."""
        if v not in VALID_TYPES:
            raise ValueError(f"Type must be one of: {', '.join(sorted(VALID_TYPES))}")
        return v

