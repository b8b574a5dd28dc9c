"""Load command documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw documents and decoding them
into the generic data model (dicts, lists and scalars) consumed by
:mod:`maru.schema.engine`. TOML, JSON and YAML are supported; the format
is taken from an explicit hint, the file extension or the response
content type, and otherwise detected by trying each decoder in turn.

The public function is :func:`load_document`. The decoded value is not
shape-checked here -- the engine reports a non-map root with its location.
"""

from __future__ import annotations

import json
import sys
import tomllib
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from maru.exceptions import DocumentLoadError

FORMATS = ("toml", "json", "yaml")
"""Format names accepted as hints."""

_SUFFIX_FORMATS = {
    ".toml": "toml",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def load_document(source: str, fmt: Optional[str] = None) -> Any:
    """Load a command document from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        fmt: Optional format (``toml``, ``json`` or ``yaml``). When omitted
            the format is derived from the source or detected from content.

    Returns:
        The decoded document.

    Raises:
        DocumentLoadError: If the source cannot be loaded or decoded.
    """
    if fmt is not None and fmt not in FORMATS:
        raise DocumentLoadError(
            f"Unsupported format: {fmt}. Supported: {', '.join(FORMATS)}"
        )
    if source == "-":
        return _load_from_stdin(fmt)
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source, fmt)
    else:
        return _load_from_file(source, fmt)


def _load_from_stdin(fmt: Optional[str] = None) -> Any:
    """Read a document from stdin.

    Raises:
        DocumentLoadError: If stdin is empty or content cannot be decoded.
    """
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise DocumentLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise DocumentLoadError("No input received from stdin")

    return parse_content(content, hint=fmt or "")


def _load_from_url(url: str, fmt: Optional[str] = None) -> Any:
    """Fetch a document from URL.

    Raises:
        DocumentLoadError: If the URL cannot be fetched or content cannot be decoded.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentLoadError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise DocumentLoadError(f"Failed to fetch document from {url}: {exc}") from exc

    hint = fmt or ""
    if not hint:
        content_type = response.headers.get("content-type", "")
        if "json" in content_type:
            hint = "json"
        elif "toml" in content_type:
            hint = "toml"
        elif "yaml" in content_type or "yml" in content_type:
            hint = "yaml"
        else:
            hint = _SUFFIX_FORMATS.get(Path(httpx.URL(url).path).suffix.lower(), "")

    return parse_content(response.text, hint=hint)


def _load_from_file(path: str, fmt: Optional[str] = None) -> Any:
    """Load a document from a local file.

    Raises:
        DocumentLoadError: If the file cannot be read or content cannot be decoded.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentLoadError(f"Document not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read document {path}: {exc}") from exc

    if not content.strip():
        raise DocumentLoadError(f"Document is empty: {path}")

    hint = fmt or _SUFFIX_FORMATS.get(file_path.suffix.lower(), "")
    return parse_content(content, hint=hint)


def parse_content(content: str, hint: str = "") -> Any:
    """Decode *content* as TOML, JSON or YAML.

    With a hint only that decoder is used. Without one, JSON is tried first,
    then TOML, then YAML: YAML accepts almost any text, so it goes last.

    Args:
        content: The raw string content.
        hint: Optional format (``toml``, ``json`` or ``yaml``).

    Returns:
        The decoded value.

    Raises:
        DocumentLoadError: If the content cannot be decoded.
    """
    if hint:
        return _DECODERS[hint](content)

    errors: list[str] = []
    for name in FORMATS_BY_PRIORITY:
        try:
            return _DECODERS[name](content)
        except DocumentLoadError as exc:
            errors.append(f"  {name.upper()} error: {exc}")

    raise DocumentLoadError(
        "Failed to parse document as JSON, TOML or YAML\n" + "\n".join(errors)
    )


def _too_deep(exc: RecursionError) -> DocumentLoadError:
    return DocumentLoadError(f"Document nested too deeply: {exc}")


def _decode_json(content: str) -> Any:
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise DocumentLoadError(f"Invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise _too_deep(exc) from exc


def _decode_toml(content: str) -> Any:
    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise DocumentLoadError(f"Invalid TOML: {exc}") from exc
    except RecursionError as exc:
        raise _too_deep(exc) from exc


def _decode_yaml(content: str) -> Any:
    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise DocumentLoadError(f"Invalid YAML: {exc}") from exc
    except RecursionError as exc:
        raise _too_deep(exc) from exc
    # A document of nothing but comments decodes to None.
    if result is None:
        raise DocumentLoadError("YAML document is empty")
    return result


_DECODERS = {
    "json": _decode_json,
    "toml": _decode_toml,
    "yaml": _decode_yaml,
}

FORMATS_BY_PRIORITY = ("json", "toml", "yaml")
