"""Shared fixtures for the xml-patch test-suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from xml_patch.tree import Element, TreeBuilder


@pytest.fixture
def builder() -> TreeBuilder:
    """A fresh TreeBuilder instance for each test."""
    return TreeBuilder()


@pytest.fixture
def xml(builder: TreeBuilder) -> Callable[[str], Element]:
    """Parse an XML string into the node model."""
    return builder.from_string
