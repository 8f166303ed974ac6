"""
Directory -> node reconciliation.

A directory becomes a single node. When it holds an init script the directory
*is* that script; when it holds ``init.meta.json`` the metadata decides its
kind and properties; otherwise it is a plain Folder. Every other entry is
reconciled beneath it, depth first.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .errors import FilesystemError, ReconcileError
from .filesystem import Directory, File, is_file, list_entries, locate_first_present
from .kinds import create_node
from .metadata import instantiate, load_metadata
from .node import Node, NodeKind
from .reserved import INIT_CANDIDATES, INIT_META_NAME, RESERVED_NAMES
from .scope import get_registry
from .transformer import FileTransformer, transform_file

logger = logging.getLogger(__name__)


def reconcile_directory(
    directory: Directory,
    scope: int,
    transformer: FileTransformer = transform_file,
) -> Node:
    """
    Build the node tree for *directory*.

    Args:
        directory:   Directory to reconcile.
        scope:       Scope id shared by every node of this pass.
        transformer: Turns a single file into a node (or None).

    Returns:
        The directory's own node, with its children attached.
    """
    node = _directory_node(directory, scope, transformer)

    for entry in list_entries(directory.path):
        if entry.name in RESERVED_NAMES:
            continue

        if is_file(entry):
            child = transformer(File(path=entry, origin=directory.origin), scope)
            if child is not None:
                node.add_child(child)
        else:
            node.add_child(
                reconcile_directory(Directory(path=entry, origin=directory.origin), scope, transformer)
            )

    logger.debug(
        "Reconciled %s as %s %r (%d children)",
        directory.path,
        node.kind,
        node.name,
        len(node.children),
    )
    return node


def _directory_node(directory: Directory, scope: int, transformer: FileTransformer) -> Node:
    init = locate_first_present(directory, INIT_CANDIDATES)

    if init is None:
        return create_node(NodeKind.FOLDER, {"Name": directory.name})

    if init.file_name == INIT_META_NAME:
        return instantiate(load_metadata(init), directory.name)

    node = transformer(init, scope, directory.name)
    if node is None:
        raise ReconcileError(f"Init script {init.path} did not produce a node")
    return node


def reconcile(path: str | Path, scope: Optional[int] = None) -> Node:
    """Reconcile the directory at *path* into a fresh node tree.

    When *scope* is None a new scope is allocated from the process registry.

    Raises:
        FilesystemError: If *path* is not a directory, or an entry cannot be read.
        ReconcileError:  Any other failure anywhere in the tree.
    """
    root = Directory.root(path)
    if not root.path.is_dir():
        raise FilesystemError(root.path, "Not a directory")

    if scope is None:
        scope = get_registry().allocate_scope()

    logger.info("Reconciling %s (scope %d)", root.path, scope)
    tree = reconcile_directory(root, scope)
    logger.info(
        "Reconciled %s: %d nodes",
        root.path,
        1 + sum(1 for _ in tree.iter_descendants()),
    )
    return tree
