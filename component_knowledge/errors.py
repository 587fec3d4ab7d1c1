"""Structured error types for the knowledge pipeline.

Errors carry a category, a human-readable message and an optional
recovery suggestion. Validation outcomes are not errors: they are
returned as result objects by the validate_* operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of pipeline errors."""

    INPUT_SHAPE = "input_shape"  # Definition or spec fails required-field checks
    AMBIGUITY = "ambiguity"  # Alignment could not group confidently
    STORE = "store"  # Graph store rejected a write or is unreachable
    VALIDATION = "validation"
    CANCELLED = "cancelled"
    CONFIGURATION = "configuration"


@dataclass
class KnowledgeError(Exception):
    """Base class for structured pipeline errors.

    Attributes:
        category: Error category for grouping.
        message: Human-readable error message.
        suggestion: Optional actionable recovery suggestion.
        details: Optional additional details dict.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Initialize the exception with the message."""
        super().__init__(self.message)

    def format(self) -> str:
        """Format the error for display, including suggestion and details."""
        lines = [f"Error: {self.message}"]

        if self.suggestion:
            lines.append(f"Suggestion: {self.suggestion}")

        if self.details:
            for key, value in self.details.items():
                lines.append(f"  {key}: {value}")

        return "\n".join(lines)

    def __str__(self) -> str:
        return self.message


class InvalidDefinitionError(KnowledgeError):
    """A component definition fails required-field checks."""

    def __init__(self, message: str, component: str | None = None):
        super().__init__(
            category=ErrorCategory.INPUT_SHAPE,
            message=message,
            suggestion="Check the extractor output for this component",
            details={"component": component} if component else None,
        )


class ManifestFormatError(KnowledgeError):
    """A serialized manifest cannot be parsed back into a manifest."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(
            category=ErrorCategory.INPUT_SHAPE,
            message=message,
            suggestion="Regenerate the manifest with the 'manifest' command",
            details={"path": path} if path else None,
        )


class GraphStoreError(KnowledgeError):
    """The graph store rejected an operation or could not be reached."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        original_error: str | None = None,
    ):
        details: dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if original_error:
            details["cause"] = original_error
        super().__init__(
            category=ErrorCategory.STORE,
            message=message,
            suggestion="Check store connectivity and constraints, then retry the build",
            details=details or None,
        )


class GraphBuildError(KnowledgeError):
    """A store failure during primary ingestion; fatal for the build call."""

    def __init__(self, stage: str, item: str, original_error: str):
        super().__init__(
            category=ErrorCategory.STORE,
            message=f"Graph build failed at stage '{stage}' for {item}: {original_error}",
            suggestion=(
                "Roll back the store transaction or remove the partially "
                "ingested library before retrying"
            ),
            details={"stage": stage, "item": item},
        )
        self.stage = stage
        self.item = item


class DuplicateIngestionError(KnowledgeError):
    """The manifest's library version is already present in the store."""

    def __init__(self, library: str, version: str):
        super().__init__(
            category=ErrorCategory.VALIDATION,
            message=f"Library {library} v{version} is already ingested",
            suggestion="Pass allow_reingest=True to ingest it again anyway",
            details={"library": library, "version": version},
        )


class OperationCancelledError(KnowledgeError):
    """A long-running operation observed a cancellation request."""

    def __init__(self, operation: str):
        super().__init__(
            category=ErrorCategory.CANCELLED,
            message=f"Operation cancelled: {operation}",
            details={"operation": operation},
        )


class ConfigurationError(KnowledgeError):
    """Error in configuration file or settings."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        suggestion: str | None = None,
    ):
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion=suggestion
            or "Check your configuration file syntax and required fields",
            details={"config_file": config_file} if config_file else None,
        )
