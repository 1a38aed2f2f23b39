from pydantic import BaseModel, Field, field_validator
from typing import Literal


class DocsConfig(BaseModel):
    base_dir: str = "docs"
    filename: str = Field(default="permissions", min_length=1)
    format: Literal["markdown", "csv", "json", "yaml"] = "markdown"

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("filename cannot be empty or whitespace")
        return v


class RoleBakerConfig(BaseModel):
    docs: DocsConfig = Field(default_factory=DocsConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
