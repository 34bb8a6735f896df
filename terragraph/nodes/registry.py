"""
Node kind registry: kind name -> NodeKind class.

Canon: every node kind registers itself with ``@register_node_kind("name")``;
graphs look kinds up here when creating, evaluating and compiling nodes.
"""

from __future__ import annotations

import difflib
from typing import Dict, List, Optional, Type

from terragraph.nodes.base import NodeKind


class NodeKindRegistry:
    """Maps kind name to a NodeKind class; ``get`` returns a shared stateless instance."""

    _global: Optional["NodeKindRegistry"] = None

    def __init__(self) -> None:
        self._classes: Dict[str, Type[NodeKind]] = {}
        self._instances: Dict[str, NodeKind] = {}

    @classmethod
    def global_registry(cls) -> NodeKindRegistry:
        if cls._global is None:
            cls._global = cls()
        return cls._global

    def register(self, kind: str, kind_class: Type[NodeKind]) -> None:
        if not kind or not kind.strip():
            raise ValueError("kind must be non-empty")
        kind = kind.strip()
        kind_class.kind = kind
        self._classes[kind] = kind_class
        self._instances.pop(kind, None)

    def get(self, kind: str) -> NodeKind:
        """Kind instance; KeyError with close matches for unknown names."""
        inst = self._instances.get(kind)
        if inst is not None:
            return inst
        cls = self._classes.get(kind)
        if cls is None:
            suggestions = difflib.get_close_matches(kind, self._classes, n=3)
            hint = f" Did you mean: {', '.join(suggestions)}?" if suggestions else ""
            available = ", ".join(sorted(self._classes))
            raise KeyError(f"Unknown node kind: {kind!r}.{hint} Registered: {available}")
        inst = cls()
        self._instances[kind] = inst
        return inst

    def kinds(self) -> List[str]:
        return sorted(self._classes)

    def __contains__(self, kind: str) -> bool:
        return kind in self._classes


def register_node_kind(kind: str, registry: Optional[NodeKindRegistry] = None):
    """Decorator: register a NodeKind class under ``kind``."""
    reg = registry or NodeKindRegistry.global_registry()

    def decorator(cls: Type[NodeKind]) -> Type[NodeKind]:
        reg.register(kind, cls)
        return cls
    return decorator


def get_node_kind(kind: str) -> NodeKind:
    return NodeKindRegistry.global_registry().get(kind)
