"""Shared pytest fixtures for json-fragments tests."""

import json
from pathlib import Path
from typing import Any

import pytest

from json_fragments import Resolver


@pytest.fixture
def resolver() -> Resolver:
    return Resolver()


@pytest.fixture
def tool_call_fragments() -> dict[str, Any]:
    """Fragments assembling an LLM-style tool call."""
    return {
        "function_name": "set_temperature",
        "param_name": "temperature",
        "param_value": 0.7,
        "param_name2": "top_p",
        "param_value2": 0.95,
        "tool_call": {
            "type": "function",
            "function": "[function_name]",
            "[param_name]": "[param_value]",
            "[param_name2]": "[param_value2]",
        },
    }


@pytest.fixture
def create_json_file(tmp_path: Path):
    """Factory fixture for creating temporary JSON files.

    Usage:
        def test_example(create_json_file):
            file = create_json_file("fragments.json", {"name": "Bob"})
            fragments = load_fragments(file)
    """

    def _create(name: str, content: Any) -> Path:
        file = tmp_path / name
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_text(json.dumps(content))
        return file

    return _create
