"""Front-matter block splitting and parsing.

A front-matter block starts on the first line with ``---`` and ends at the
next line holding ``---`` or ``...``. Its content is YAML.
"""

from __future__ import annotations

from typing import Any

import yaml

from tipstage.core.errors import MalformedFrontMatter

_OPEN = "---"
_CLOSE = ("---", "...")


def split_front_matter(text: str, source: str = "<string>") -> tuple[dict[str, Any], str]:
    """Split raw document text into front-matter mapping and body.

    Args:
        text: Raw document text
        source: Source name used in error messages

    Returns:
        Tuple of (front-matter mapping, body text)

    Raises:
        MalformedFrontMatter: If the block is missing, unterminated,
            not valid YAML or not a mapping
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != _OPEN:
        raise MalformedFrontMatter(source, "missing front-matter block")

    for i in range(1, len(lines)):
        if lines[i].rstrip() in _CLOSE:
            raw = "".join(lines[1:i])
            body = "".join(lines[i + 1 :])
            break
    else:
        raise MalformedFrontMatter(source, "unterminated front-matter block")

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise MalformedFrontMatter(source, f"invalid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedFrontMatter(source, "front-matter must be a mapping")

    return data, body.lstrip("\n")
