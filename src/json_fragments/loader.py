"""Loading fragment maps from JSON files."""

import json
import logging
from pathlib import Path
from typing import Annotated, Any

from deepmerge import always_merger
from pydantic import Field, JsonValue, TypeAdapter, ValidationError

from json_fragments.exceptions import LoaderError

logger = logging.getLogger(__name__)

FragmentName = Annotated[str, Field(min_length=1)]

FRAGMENT_MAP_ADAPTER: TypeAdapter[dict[str, JsonValue]] = TypeAdapter(dict[FragmentName, JsonValue])


def load_fragments(*paths: Path | str, merge: bool = False) -> dict[str, JsonValue]:
    """Load and combine fragment maps from JSON files.

    Args:
        paths: JSON files whose top level maps fragment names to values
        merge: If True, object fragments defined in several files are deep-merged.
               If False (default), a name defined twice is an error.

    Returns:
        Combined fragment map, in file order

    Raises:
        LoaderError: If a file cannot be read or parsed, is not a fragment map,
                     or fragments from different files conflict
    """
    fragments: dict[str, JsonValue] = {}

    for path in map(Path, paths):
        loaded = _load_file(path)

        for name, value in loaded.items():
            if name not in fragments:
                fragments[name] = value
                continue

            if not merge:
                raise LoaderError(f"Fragment '{name}' in {path} is already defined")

            _detect_merge_conflicts(fragments[name], value, name)
            fragments[name] = always_merger.merge(fragments[name], value)

    logger.debug(f"Loaded {len(fragments)} fragments from {len(paths)} file(s)")
    return fragments


def _load_file(path: Path) -> dict[str, JsonValue]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise LoaderError(f"Failed to load JSON from {path}: {e}") from e

    try:
        return FRAGMENT_MAP_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise LoaderError(f"Invalid fragment map in {path}: {e}") from e


def _detect_merge_conflicts(base: Any, overlay: Any, path: str) -> None:
    """Reject merges that would override a value rather than extend it.

    Raises:
        LoaderError: If a merge conflict is detected
    """
    if isinstance(base, dict) and isinstance(overlay, dict):
        for key, overlay_value in overlay.items():
            if key in base:
                _detect_merge_conflicts(base[key], overlay_value, f"{path}.{key}")
        return

    if isinstance(base, list) and isinstance(overlay, list):
        # lists are appended
        return

    if base == overlay and type(base) is type(overlay):
        return

    if type(base) is not type(overlay):
        raise LoaderError(f"Merge conflict: Cannot merge {type(base).__name__} with {type(overlay).__name__} at '{path}'")
    raise LoaderError(f"Merge conflict: Cannot override {type(base).__name__} value at '{path}'")
