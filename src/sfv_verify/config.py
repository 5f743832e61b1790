"""Configuration schema for sfv-verify."""

from typing import Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .path_utils import DEFAULT_MANIFEST_EXTENSION, DEFAULT_MANIFEST_NAME, normalize_extension


class LoggingConfig(BaseModel):
    """Logging configuration."""
    
    model_config = ConfigDict(extra='forbid')
    
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level"
    )
    format: Literal["simple", "detailed", "json"] = Field(
        default="simple",
        description="Log format type"
    )
    file: str | None = Field(default=None, description="Optional log file path")
    
    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Normalize log level to uppercase for case-insensitive input."""
        if isinstance(v, str):
            return v.upper()
        return v
    
    @field_validator('format', mode='before')
    @classmethod
    def normalize_format(cls, v: str) -> str:
        """Normalize format to lowercase for case-insensitive input."""
        if isinstance(v, str):
            return v.lower()
        return v


class VerifierConfig(BaseModel):
    """Checksum and manifest settings."""
    
    model_config = ConfigDict(extra='forbid')
    
    manifest_extension: str = Field(
        default=DEFAULT_MANIFEST_EXTENSION,
        min_length=1,
        description="Extension identifying manifest files among input paths"
    )
    default_manifest_name: str = Field(
        default=DEFAULT_MANIFEST_NAME,
        min_length=1,
        description="File name used when saving a manifest without an explicit path"
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of manifest files"
    )
    chunk_size: int = Field(
        default=65536,
        ge=1,
        description="Read size in bytes for checksum computation"
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        description="Number of hashing threads (1 = sequential)"
    )
    progress_log_interval: int = Field(
        default=100,
        ge=1,
        description="Log progress every N files"
    )
    
    @field_validator('manifest_extension', mode='before')
    @classmethod
    def normalize_manifest_extension(cls, v: str) -> str:
        """Normalize to lowercase with a leading dot ("SFV" -> ".sfv")."""
        if isinstance(v, str):
            return normalize_extension(v)
        return v


class SFVVerifyConfig(BaseModel):
    """Root configuration for sfv-verify."""
    
    model_config = ConfigDict(extra='forbid')
    
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    verifier: VerifierConfig = Field(default_factory=VerifierConfig)
