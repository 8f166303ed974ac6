from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum
from typing import Any, Union

from pydantic import BaseModel, Field, PrivateAttr

Primitive = Union[str, int, float, bool]


class NodeKind(StrEnum):
    INSTANCE       = "Instance"
    FOLDER         = "Folder"
    CONFIGURATION  = "Configuration"
    MODEL          = "Model"
    SCRIPT         = "Script"
    LOCAL_SCRIPT   = "LocalScript"
    MODULE_SCRIPT  = "ModuleScript"
    STRING_VALUE   = "StringValue"
    INT_VALUE      = "IntValue"
    NUMBER_VALUE   = "NumberValue"
    BOOL_VALUE     = "BoolValue"


SCRIPT_KINDS = frozenset({NodeKind.SCRIPT, NodeKind.LOCAL_SCRIPT, NodeKind.MODULE_SCRIPT})


class Node(BaseModel):
    """One element of a reconciled tree.

    Properties are written through the kind registry
    (:mod:`tree_reconciler.components.kinds`), never directly. The parent link
    is private so dumping a node only walks downwards.
    """

    kind: str
    name: str
    properties: dict[str, Primitive] = Field(default_factory=dict)
    children: list[Node] = Field(default_factory=list)
    environment_key: str | None = None

    _parent: Node | None = PrivateAttr(default=None)

    # Nodes are compared by identity; compare to_dict() output for shape.
    def __eq__(self, other: object) -> bool:
        return self is other

    __hash__ = object.__hash__

    @property
    def parent(self) -> Node | None:
        return self._parent

    @property
    def is_script(self) -> bool:
        return self.kind in SCRIPT_KINDS

    def add_child(self, child: Node) -> Node:
        """Attach *child* under this node, detaching it from any previous parent.

        Raises:
            ValueError: If *child* is this node or one of its ancestors.
        """
        ancestor: Node | None = self
        while ancestor is not None:
            if ancestor is child:
                raise ValueError(f"Cannot parent {child.name!r} beneath itself")
            ancestor = ancestor._parent

        child.detach()
        self.children.append(child)
        child._parent = self
        return child

    def detach(self) -> None:
        """Remove this node from its parent's children, if it has a parent."""
        if self._parent is None:
            return
        siblings = self._parent.children
        siblings[:] = [c for c in siblings if c is not self]
        self._parent = None

    def find_first_child(self, name: str) -> Node | None:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def iter_descendants(self) -> Iterator[Node]:
        """Depth-first, pre-order walk of every node below this one."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()


Node.model_rebuild()
