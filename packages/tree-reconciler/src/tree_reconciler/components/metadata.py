"""
``init.meta.json`` decoding and metadata-driven node creation.

A metadata document is validated into :class:`InstanceMetadata` before any
node is built, so malformed shapes never reach the node factory::

    {"kind": "Model", "properties": {"Size": 3, "Scale": 2}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
)

from .errors import MetadataError, ParseError
from .filesystem import File, read_bytes
from .kinds import DEFAULT_KINDS, KindRegistry
from .node import Node, NodeKind

logger = logging.getLogger(__name__)

StrictPrimitive = Union[StrictBool, StrictInt, StrictFloat, StrictStr]


class InstanceMetadata(BaseModel):
    """Decoded metadata: an optional kind and ordered primitive properties."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Optional[StrictStr] = Field(
        default=None,
        validation_alias=AliasChoices("kind", "className"),
    )
    properties: Optional[dict[str, StrictPrimitive]] = None


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error["loc"]) or "<root>"
        parts.append(f"{loc}: {error['msg']}")
    return "; ".join(parts)


def decode_metadata(text: str, source: str | Path = "<metadata>") -> InstanceMetadata:
    """Parse and validate a metadata document.

    Args:
        text:   Raw file contents.
        source: Path used in error messages.

    Raises:
        ParseError:    If *text* is not valid JSON.
        MetadataError: If the JSON does not have the metadata shape.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(source, f"{exc.msg} (line {exc.lineno}, column {exc.colno})") from exc

    if not isinstance(raw, dict):
        raise MetadataError(source, f"expected a JSON object, got {type(raw).__name__}")

    try:
        return InstanceMetadata.model_validate(raw)
    except ValidationError as exc:
        raise MetadataError(source, _describe(exc)) from exc


def load_metadata(file: File) -> InstanceMetadata:
    """Read and decode a metadata file.

    Raises:
        FilesystemError: If the file cannot be read.
        ParseError:      If the bytes are not UTF-8 or not valid JSON.
        MetadataError:   If the JSON does not have the metadata shape.
    """
    raw = read_bytes(file.path)
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(file.path, f"not valid UTF-8 (byte {exc.start})") from exc
    return decode_metadata(text, file.path)


def instantiate(
    metadata: InstanceMetadata,
    name: str,
    registry: KindRegistry = DEFAULT_KINDS,
) -> Node:
    """Create a node from *metadata*, named *name*.

    The node is created before any property is applied so its kind (and name)
    are settled first. Properties are then applied in declaration order.

    Raises:
        UnsupportedKindError:    If ``metadata.kind`` is not a known kind.
        PropertyAssignmentError: If a property is unknown or badly typed.
    """
    node = registry.create(metadata.kind or NodeKind.FOLDER, {"Name": name})

    for key, value in (metadata.properties or {}).items():
        registry.assign(node, key, value)

    logger.debug(
        "Instantiated %s %r with %d properties",
        node.kind,
        node.name,
        len(metadata.properties or {}),
    )
    return node
