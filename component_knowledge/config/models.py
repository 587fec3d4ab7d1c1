"""Configuration model with validation."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..dialects import Dialect, parse_dialect


class KnowledgeConfig(BaseModel):
    """Pipeline configuration model with validation."""

    # Library identity stamped into manifests
    library_name: str = Field(default="components")
    library_version: str = Field(default="1.0.0")

    # Alignment and manifest generation
    default_dialect: Dialect = Field(default=Dialect.REACT)
    min_confidence: float = Field(default=0.8, ge=0.0, le=1.0)

    # Graph inference
    similarity_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    same_type_bucket_limit: int | None = Field(default=None, ge=2)

    # Worker pool for order-independent units (1 = sequential)
    max_workers: int = Field(default=1, ge=1, le=32)

    # Graph store
    store_timeout_seconds: float = Field(default=30.0, gt=0)
    allow_reingest: bool = Field(default=False)
    neo4j_uri: str = Field(default="bolt://localhost:7687")
    neo4j_user: str = Field(default="neo4j")
    neo4j_password: str = Field(default="")
    neo4j_database: str = Field(default="neo4j")

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text")

    @field_validator("default_dialect", mode="before")
    @classmethod
    def validate_dialect(cls, v: Any) -> Dialect:
        return parse_dialect(v)

    @field_validator("library_name", "library_version")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Library name and version cannot be empty")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in {"text", "json"}:
            raise ValueError("log_format must be 'text' or 'json'")
        return v
