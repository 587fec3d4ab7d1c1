"""
Shared fixtures for the component knowledge test suite.

Provides test fixtures for:
- Per-dialect component definitions (single and multi-component sets)
- Aligned components and generated manifests
- In-memory graph store
- Configuration management
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from component_knowledge.alignment import AlignedComponent, CrossDialectAligner
from component_knowledge.config import KnowledgeConfig
from component_knowledge.dialects import Dialect
from component_knowledge.graph import InMemoryGraphStore
from component_knowledge.knowledge_logging import ROOT_LOGGER_NAME
from component_knowledge.manifest import ComponentManifest, ManifestGenerator
from component_knowledge.models import (
    ComponentDefinition,
    EventDefinition,
    PropDefinition,
    SlotDefinition,
    SourceReference,
)

FIXED_TIMESTAMP = "2026-01-01T00:00:00+00:00"


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Undo setup_logging() side effects (handlers, propagation) between tests."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Definition fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def button_definitions() -> list[ComponentDefinition]:
    """A react KButton and a vue el-button sharing one click handler."""
    return [
        ComponentDefinition(
            name="KButton",
            dialect=Dialect.REACT,
            props=(PropDefinition(name="onClick", type="function", required=True),),
        ),
        ComponentDefinition(
            name="el-button",
            dialect=Dialect.VUE,
            props=(PropDefinition(name="@click", type="function"),),
        ),
    ]


@pytest.fixture()
def sample_definitions() -> list[ComponentDefinition]:
    """A small three-dialect library: Button, Input, Form and Modal."""
    return [
        ComponentDefinition(
            name="KButton",
            dialect=Dialect.REACT,
            docs="Clickable button",
            props=(
                PropDefinition(name="type", type="string", default="default"),
                PropDefinition(name="disabled", type="boolean"),
                PropDefinition(name="onClick", type="function"),
            ),
            slots=(SlotDefinition(name="children"),),
            source_refs=(SourceReference("packages/react/button.tsx", 10, 80),),
        ),
        ComponentDefinition(
            name="el-button",
            dialect=Dialect.VUE,
            props=(
                PropDefinition(name="type", type="string"),
                PropDefinition(name=":disabled", type="boolean"),
            ),
            events=(EventDefinition(name="click", type="MouseEvent"),),
            slots=(SlotDefinition(name="default"),),
        ),
        ComponentDefinition(
            name="KButton",
            dialect=Dialect.INTACT,
            props=(PropDefinition(name="type", type="string"),),
            events=(EventDefinition(name="ev-click", type="MouseEvent"),),
        ),
        ComponentDefinition(
            name="KInput",
            dialect=Dialect.REACT,
            props=(
                PropDefinition(name="value", type="string"),
                PropDefinition(name="placeholder", type="string"),
                PropDefinition(name="onChange", type="function"),
            ),
        ),
        ComponentDefinition(
            name="el-input",
            dialect=Dialect.VUE,
            props=(
                PropDefinition(name="modelValue", type="string"),
                PropDefinition(name="placeholder", type="string"),
            ),
            events=(EventDefinition(name="input", payload="string"),),
        ),
        ComponentDefinition(
            name="KForm",
            dialect=Dialect.REACT,
            props=(PropDefinition(name="model", type="object", required=True),),
            slots=(SlotDefinition(name="children"),),
        ),
        ComponentDefinition(
            name="el-form",
            dialect=Dialect.VUE,
            props=(PropDefinition(name=":model", type="object", required=True),),
        ),
        ComponentDefinition(
            name="KModal",
            dialect=Dialect.REACT,
            props=(
                PropDefinition(name="title", type="string"),
                PropDefinition(name="visible", type="boolean"),
            ),
            slots=(SlotDefinition(name="children"),),
        ),
        ComponentDefinition(
            name="el-dialog",
            dialect=Dialect.VUE,
            props=(PropDefinition(name="title", type="string"),),
        ),
    ]


@pytest.fixture()
def definitions_file(tmp_path: Path, sample_definitions) -> Path:
    """sample_definitions serialized as an extractor JSON array."""
    path = tmp_path / "definitions.json"
    path.write_text(json.dumps([d.to_dict() for d in sample_definitions]))
    return path


# ---------------------------------------------------------------------------
# Configuration, alignment and manifest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> KnowledgeConfig:
    """Deterministic configuration for a test library."""
    return KnowledgeConfig(library_name="Kpc", library_version="2.0.0")


@pytest.fixture()
def aligned(config, sample_definitions) -> list[AlignedComponent]:
    return CrossDialectAligner(config).align(sample_definitions)


@pytest.fixture()
def manifest(config, aligned) -> ComponentManifest:
    return ManifestGenerator(config).generate(aligned, generated_at=FIXED_TIMESTAMP)


@pytest.fixture()
def memory_store() -> Iterator[InMemoryGraphStore]:
    """An initialized in-memory graph store, closed after the test."""
    store = InMemoryGraphStore()
    store.initialize()
    yield store
    store.close()
