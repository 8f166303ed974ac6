from __future__ import annotations

import logging
from typing import Optional, Protocol

from .filesystem import File, read_text
from .kinds import create_node
from .node import Node, NodeKind
from .reserved import SCRIPT_SUFFIXES, TEXT_SUFFIX
from .scope import environment_key

logger = logging.getLogger(__name__)


class FileTransformer(Protocol):
    def __call__(
        self, file: File, scope: int, name_override: Optional[str] = None
    ) -> Optional[Node]: ...


def transform_file(file: File, scope: int, name_override: Optional[str] = None) -> Optional[Node]:
    """
    Turn a single file into a node.

    ``*.server.lua`` becomes a Script, ``*.client.lua`` a LocalScript, any
    other ``*.lua`` a ModuleScript, and ``*.txt`` a StringValue. Other files
    produce no node.

    Args:
        file:          The file to transform.
        scope:         Scope of the reconciliation pass; script nodes get an
                       environment key within it.
        name_override: Name to use instead of the one derived from the file
                       (an init script takes its directory's name).

    Returns:
        The new node, or None when the file type is not mapped to a node.
    """
    file_name = file.file_name

    for suffix, kind in SCRIPT_SUFFIXES:
        if file_name.endswith(suffix):
            node = create_node(
                kind,
                {
                    "Name": name_override or file_name[: -len(suffix)],
                    "Source": read_text(file.path),
                },
            )
            node.environment_key = environment_key(scope, file.path)
            return node

    if file_name.endswith(TEXT_SUFFIX):
        return create_node(
            NodeKind.STRING_VALUE,
            {
                "Name": name_override or file_name[: -len(TEXT_SUFFIX)],
                "Value": read_text(file.path),
            },
        )

    logger.debug("No node for %s", file.relative_path)
    return None
