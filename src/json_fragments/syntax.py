from collections.abc import Iterator
from typing import NamedTuple

from json_fragments.config import ResolverConfig


class ReferenceSpan(NamedTuple):
    start: int
    # index just past the closing delimiter
    end: int
    name: str


def is_whole_reference(value: str, config: ResolverConfig) -> bool:
    """Check if the entire string is a single delimited fragment reference."""
    return (
        len(value) >= len(config.delimiter_start) + len(config.delimiter_end)
        and value.startswith(config.delimiter_start)
        and value.endswith(config.delimiter_end)
    )


def extract_fragment_name(value: str, config: ResolverConfig) -> str:
    """Strip the delimiters from a whole reference."""
    return value[len(config.delimiter_start) : len(value) - len(config.delimiter_end)]


def is_template(value: str, config: ResolverConfig) -> bool:
    """Check if a string may carry embedded references."""
    return config.delimiter_start in value and not is_whole_reference(value, config)


def find_reference(value: str, pos: int, config: ResolverConfig) -> ReferenceSpan | None:
    """Find the innermost reference at or after pos.

    The first closing delimiter is located first, then the nearest opening
    delimiter before it that does not start before pos. Closing delimiters
    with no such opening delimiter are skipped.
    """
    start, end = config.delimiter_start, config.delimiter_end

    while pos < len(value):
        end_pos = value.find(end, pos)
        if end_pos == -1:
            return None

        start_pos = value.rfind(start, pos, end_pos)
        if start_pos == -1:
            pos = end_pos + len(end)
            continue

        return ReferenceSpan(start_pos, end_pos + len(end), value[start_pos + len(start) : end_pos])

    return None


def iter_embedded_names(value: str, config: ResolverConfig) -> Iterator[str]:
    """Yield the fragment names referenced inside a template string, left to right."""
    pos = 0
    while True:
        span = find_reference(value, pos, config)
        if span is None:
            return
        yield span.name
        pos = span.end
