"""
reconcile-tree - mirrors a directory into a node tree and prints it as JSON.

Naming conventions applied to each directory:

    init.lua / init.server.lua / init.client.lua
        The directory becomes that script (ModuleScript / Script / LocalScript).
    init.meta.json
        {"kind": <node kind>, "properties": {<name>: <primitive>, ...}}
        decides the directory's kind and properties.
    anything else
        The directory becomes a Folder.

Each node is written as:

    {
        "kind": <node kind>,
        "name": <node name>,
        "properties": {<name>: <value>},
        "children": [<nodes>],
        "environment_key": <"scope:path" for scripts, else null>
    }

Usage (CLI):
    reconcile-tree <directory> [--output <file.json>] [--scope N]

Usage (library):
    from tree_reconciler import reconcile
    tree = reconcile("/path/to/dir")
"""

import argparse
import json
import logging
import sys

from tree_reconciler.components import ReconcileError, reconcile
from tree_reconciler.config import settings

logger = logging.getLogger(__name__)


def reconcile_tree(root: str, scope: int | None = None) -> dict:
    """Reconcile *root* and return the tree as a plain dict."""
    return reconcile(root, scope).to_dict()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Mirror a directory into a node tree and output it as JSON."
    )
    parser.add_argument("directory", help="Root directory to reconcile")
    parser.add_argument(
        "--output",
        "-o",
        metavar="FILE",
        help="Write JSON output to FILE instead of stdout",
    )
    parser.add_argument(
        "--scope",
        type=int,
        default=None,
        help="Scope id to use (default: allocate a new one)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        tree = reconcile_tree(args.directory, args.scope)
    except ReconcileError as exc:
        logger.error("Reconciliation failed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    output = json.dumps(tree, indent=2)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        print(f"Tree written to {args.output}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
