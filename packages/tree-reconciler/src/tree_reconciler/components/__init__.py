from .errors import (
    FilesystemError,
    KindRegistrationError,
    MetadataError,
    ParseError,
    PropertyAssignmentError,
    ReconcileError,
    UnsupportedKindError,
)
from .filesystem import Directory, File
from .kinds import DEFAULT_KINDS, KindRegistry, PropertySetter, create_node, set_property
from .metadata import InstanceMetadata, decode_metadata, instantiate
from .node import Node, NodeKind
from .reconciler import reconcile, reconcile_directory
from .scope import ScopeRegistry, VirtualEnvironment, get_registry
from .transformer import transform_file

__all__ = [
    "DEFAULT_KINDS",
    "Directory",
    "File",
    "FilesystemError",
    "InstanceMetadata",
    "KindRegistrationError",
    "KindRegistry",
    "MetadataError",
    "Node",
    "NodeKind",
    "ParseError",
    "PropertyAssignmentError",
    "PropertySetter",
    "ReconcileError",
    "ScopeRegistry",
    "UnsupportedKindError",
    "VirtualEnvironment",
    "create_node",
    "decode_metadata",
    "get_registry",
    "instantiate",
    "reconcile",
    "reconcile_directory",
    "set_property",
    "transform_file",
]
