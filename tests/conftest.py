"""Pytest configuration and shared fixtures for the mdattrs test suite.

This module provides shared fixtures and test configuration used across
the unit and integration tests.
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=50)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - full parse and render pipeline")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


@pytest.fixture
def sample_markdown() -> str:
    """Provide a document exercising every attribute placement.

    Returns
    -------
    str
        Markdown with inline, block trailing, fence and standalone attributes

    """
    return (
        "# Introduction {#intro .lead}\n"
        "\n"
        "Some *emphasis*{.hl} and a [link](https://example.com){target=\"_blank\"}.\n"
        "\n"
        "```python {.numbered}\n"
        "print('hi')\n"
        "```\n"
        "\n"
        "> quoted text\n"
        "\n"
        "{.aside}\n"
    )


@pytest.fixture
def markdown_file(tmp_path, sample_markdown):
    """Write the sample document to a file and return its path."""
    path = tmp_path / "sample.md"
    path.write_text(sample_markdown, encoding="utf-8")
    return path
