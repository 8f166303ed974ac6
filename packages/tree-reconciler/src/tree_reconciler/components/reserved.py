"""File naming conventions shared by the reconciler and the file transformer."""

from __future__ import annotations

from .node import NodeKind

INIT_SCRIPT_NAMES: tuple[str, ...] = ("init.lua", "init.server.lua", "init.client.lua")
INIT_META_NAME = "init.meta.json"

# Priority order: the first name present in a directory wins, so an init
# script always beats init.meta.json.
INIT_CANDIDATES: tuple[str, ...] = (*INIT_SCRIPT_NAMES, INIT_META_NAME)

# Names that never become children of the directory that contains them.
RESERVED_NAMES = frozenset(INIT_CANDIDATES)

# Longest suffix first so "x.server.lua" is not matched as plain ".lua".
SCRIPT_SUFFIXES: tuple[tuple[str, NodeKind], ...] = (
    (".server.lua", NodeKind.SCRIPT),
    (".client.lua", NodeKind.LOCAL_SCRIPT),
    (".lua", NodeKind.MODULE_SCRIPT),
)

TEXT_SUFFIX = ".txt"
