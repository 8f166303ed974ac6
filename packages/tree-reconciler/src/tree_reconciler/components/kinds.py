"""
Per-kind property tables and the node factory.

Every kind owns a table mapping property name -> :class:`PropertySetter`.
Assignments go through that table, so an unknown name or a value of the wrong
type is rejected explicitly instead of being silently stored. Tables are
checked once, when the kind is registered.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from .errors import KindRegistrationError, PropertyAssignmentError, UnsupportedKindError
from .node import Node, NodeKind, Primitive

logger = logging.getLogger(__name__)

SUPPORTED_TYPES: tuple[type, ...] = (str, int, float, bool)


def _matches(value_type: type, value: object) -> bool:
    # bool is a subclass of int, so it is only accepted where bool is declared.
    if value_type is bool:
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if value_type is float:
        return isinstance(value, (int, float))
    return isinstance(value, value_type)


@dataclass(frozen=True)
class PropertySetter:
    """Typed setter for a single property.

    Attributes:
        name:       Property name as written in metadata.
        value_type: One of ``str``, ``int``, ``float``, ``bool``.
        default:    Value stored when the node is created, or ``None`` for
                    properties that have no stored value.
        apply:      Optional custom write; defaults to storing the value in
                    ``node.properties``.
    """

    name: str
    value_type: type
    default: Primitive | None = None
    apply: Callable[[Node, Primitive], None] | None = None

    def assign(self, node: Node, value: object) -> None:
        if not _matches(self.value_type, value):
            raise PropertyAssignmentError(
                node.kind,
                self.name,
                f"expected {self.value_type.__name__}, got {type(value).__name__}",
            )
        if self.value_type is float:
            value = float(value)  # type: ignore[arg-type]
        if self.apply is not None:
            self.apply(node, value)  # type: ignore[arg-type]
        else:
            node.properties[self.name] = value  # type: ignore[assignment]


@dataclass(frozen=True)
class KindSpec:
    name: str
    setters: Mapping[str, PropertySetter]
    creatable: bool = True


class KindRegistry:
    """Registry of node kinds and their property tables.

    Example::

        registry = KindRegistry()
        registry.register("Instance", [PropertySetter("Name", str, apply=_set_name)],
                          base=None, creatable=False)
        registry.register("Folder")
        folder = registry.create("Folder", {"Name": "Assets"})
    """

    def __init__(self) -> None:
        self._kinds: dict[str, KindSpec] = {}

    def __contains__(self, kind: object) -> bool:
        return kind in self._kinds

    def kinds(self) -> list[str]:
        return list(self._kinds)

    def register(
        self,
        kind: str,
        setters: Iterable[PropertySetter] = (),
        base: str | None = NodeKind.INSTANCE,
        creatable: bool = True,
    ) -> KindSpec:
        """Validate and register a kind.

        The kind inherits every setter of *base*; it may not redeclare one.

        Raises:
            KindRegistrationError: On a duplicate kind, an unknown base, or an
                                   invalid setter table.
        """
        if not kind:
            raise KindRegistrationError("Kind name must be a non-empty string")
        if kind in self._kinds:
            raise KindRegistrationError(f"Kind {kind!r} is already registered")

        table: dict[str, PropertySetter] = {}
        if base is not None:
            if base not in self._kinds:
                raise KindRegistrationError(f"Base kind {base!r} of {kind!r} is not registered")
            table.update(self._kinds[base].setters)

        for setter in setters:
            if not setter.name:
                raise KindRegistrationError(f"{kind}: property names must be non-empty")
            if setter.name in table:
                raise KindRegistrationError(f"{kind}: property {setter.name!r} declared twice")
            if setter.value_type not in SUPPORTED_TYPES:
                raise KindRegistrationError(
                    f"{kind}.{setter.name}: unsupported type {setter.value_type!r}"
                )
            if setter.default is not None and not _matches(setter.value_type, setter.default):
                raise KindRegistrationError(
                    f"{kind}.{setter.name}: default {setter.default!r} is not a "
                    f"{setter.value_type.__name__}"
                )
            table[setter.name] = setter

        spec = KindSpec(name=str(kind), setters=table, creatable=creatable)
        self._kinds[spec.name] = spec
        logger.debug("Registered kind %s with %d properties", kind, len(table))
        return spec

    def get(self, kind: str) -> KindSpec:
        spec = self._kinds.get(kind)
        if spec is None or not spec.creatable:
            raise UnsupportedKindError(kind)
        return spec

    def create(self, kind: str, properties: Mapping[str, object] | None = None) -> Node:
        """Build a node of *kind* and apply *properties* in their given order.

        A ``Name`` entry sets the node's name; without one the node is named
        after its kind.

        Raises:
            UnsupportedKindError:    If *kind* is unknown or abstract.
            PropertyAssignmentError: If a property is invalid for *kind*.
        """
        spec = self.get(kind)
        node = Node(kind=spec.name, name=spec.name)
        for setter in spec.setters.values():
            if setter.default is not None:
                node.properties[setter.name] = setter.default
        for key, value in (properties or {}).items():
            self.assign(node, key, value)
        return node

    def assign(self, node: Node, prop: str, value: object) -> None:
        """Write one property through the node kind's setter table."""
        setter = self.get(node.kind).setters.get(prop)
        if setter is None:
            raise PropertyAssignmentError(node.kind, prop, "no such property")
        setter.assign(node, value)


# ---------------------------------------------------------------------------
# Built-in kinds
# ---------------------------------------------------------------------------


def _set_name(node: Node, value: Primitive) -> None:
    node.name = str(value)


def _set_scale(node: Node, value: Primitive) -> None:
    """Rescale the model: Size is multiplied by new/old scale."""
    scale = float(value)
    if scale <= 0:
        raise PropertyAssignmentError(node.kind, "Scale", "must be greater than zero")
    previous = float(node.properties.get("Scale", 1.0))
    node.properties["Size"] = float(node.properties.get("Size", 1.0)) * scale / previous
    node.properties["Scale"] = scale


def register_builtin_kinds(registry: KindRegistry) -> KindRegistry:
    registry.register(
        NodeKind.INSTANCE,
        [
            PropertySetter("Name", str, apply=_set_name),
            PropertySetter("Archivable", bool, default=True),
        ],
        base=None,
        creatable=False,
    )
    registry.register(NodeKind.FOLDER)
    registry.register(NodeKind.CONFIGURATION)
    registry.register(
        NodeKind.MODEL,
        [
            PropertySetter("Size", float, default=1.0),
            PropertySetter("Scale", float, default=1.0, apply=_set_scale),
        ],
    )
    for script_kind in (NodeKind.SCRIPT, NodeKind.LOCAL_SCRIPT):
        registry.register(
            script_kind,
            [
                PropertySetter("Source", str, default=""),
                PropertySetter("Disabled", bool, default=False),
            ],
        )
    registry.register(NodeKind.MODULE_SCRIPT, [PropertySetter("Source", str, default="")])
    registry.register(NodeKind.STRING_VALUE, [PropertySetter("Value", str, default="")])
    registry.register(NodeKind.INT_VALUE, [PropertySetter("Value", int, default=0)])
    registry.register(NodeKind.NUMBER_VALUE, [PropertySetter("Value", float, default=0.0)])
    registry.register(NodeKind.BOOL_VALUE, [PropertySetter("Value", bool, default=False)])
    return registry


DEFAULT_KINDS = register_builtin_kinds(KindRegistry())


def create_node(kind: str, properties: Mapping[str, object] | None = None) -> Node:
    """Create a node from the built-in kind registry."""
    return DEFAULT_KINDS.create(kind, properties)


def set_property(node: Node, prop: str, value: object) -> None:
    DEFAULT_KINDS.assign(node, prop, value)
