"""Unit tests for structured error types."""

import pytest

from component_knowledge.cancellation import CancellationToken
from component_knowledge.errors import (
    ConfigurationError,
    DuplicateIngestionError,
    ErrorCategory,
    GraphBuildError,
    GraphStoreError,
    InvalidDefinitionError,
    KnowledgeError,
    OperationCancelledError,
)


class TestKnowledgeError:
    """Tests for the base error and its formatting."""

    def test_format_with_suggestion_and_details(self):
        error = KnowledgeError(
            category=ErrorCategory.VALIDATION,
            message="Manifest is invalid",
            suggestion="Fix the listed errors",
            details={"errors": 2},
        )

        assert error.format() == (
            "Error: Manifest is invalid\nSuggestion: Fix the listed errors\n  errors: 2"
        )
        assert str(error) == "Manifest is invalid"

    def test_format_message_only(self):
        error = KnowledgeError(category=ErrorCategory.STORE, message="down", details=None)
        assert error.format() == "Error: down"


class TestSubclasses:
    def test_invalid_definition(self):
        error = InvalidDefinitionError("Missing name", component="KButton")

        assert error.category == ErrorCategory.INPUT_SHAPE
        assert error.details == {"component": "KButton"}
        assert isinstance(error, KnowledgeError)

    def test_store_error_details(self):
        error = GraphStoreError("write failed", operation="create_node", original_error="boom")
        assert error.details == {"operation": "create_node", "cause": "boom"}

    def test_build_error_names_stage_and_item(self):
        error = GraphBuildError("patterns", "pattern form-pattern", "constraint")

        assert error.message == (
            "Graph build failed at stage 'patterns' for pattern form-pattern: constraint"
        )
        assert (error.stage, error.item) == ("patterns", "pattern form-pattern")

    def test_duplicate_ingestion(self):
        error = DuplicateIngestionError("Kpc", "2.0.0")

        assert error.message == "Library Kpc v2.0.0 is already ingested"
        assert "allow_reingest" in error.format()

    def test_configuration_error_default_suggestion(self):
        error = ConfigurationError("Invalid configuration: bad", config_file="cfg.json")

        assert error.category == ErrorCategory.CONFIGURATION
        assert "  config_file: cfg.json" in error.format()


class TestCancellationToken:
    def test_not_cancelled_by_default(self):
        token = CancellationToken()

        assert not token.is_cancelled
        token.raise_if_cancelled("align")

    def test_cancel_raises(self):
        token = CancellationToken()
        token.cancel()

        assert token.is_cancelled
        with pytest.raises(OperationCancelledError) as exc_info:
            token.raise_if_cancelled("align")
        assert exc_info.value.message == "Operation cancelled: align"
        assert exc_info.value.category == ErrorCategory.CANCELLED
