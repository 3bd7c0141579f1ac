from __future__ import annotations

import uuid
from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Protocol, Tuple

from floorgrid.project.schema import Floor, Node


class NodeNotFoundError(KeyError):
    pass


@dataclass(frozen=True)
class StoreSnapshot:
    nodes: Dict[str, Node] = field(default_factory=dict)
    parents: Dict[str, Optional[str]] = field(default_factory=dict)
    label: str = ""


class NodeStore(Protocol):
    def add(self, node: Node, parent_id: Optional[str] = None) -> str: ...

    def get(self, node_id: str) -> Node: ...

    def find(self, node_id: str) -> Optional[Node]: ...

    def update(self, node_id: str, **changes: Any) -> Node: ...

    def move(self, node_id: str, parent_id: Optional[str]) -> None: ...

    def delete(self, node_id: str) -> None: ...

    def children(self, parent_id: Optional[str], node_type: Optional[str] = None) -> List[Node]: ...

    def descendants(self, parent_id: str, node_type: Optional[str] = None) -> List[Node]: ...

    def parent_of(self, node_id: str) -> Optional[str]: ...

    def snapshot(self, label: str = "") -> StoreSnapshot: ...

    def restore(self, snapshot: StoreSnapshot) -> None: ...


def new_node_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class InMemoryNodeStore:
    """Dict-backed node store keyed by opaque string ids with parent scoping."""

    def __init__(self) -> None:
        self._nodes: Dict[str, Node] = {}
        self._parents: Dict[str, Optional[str]] = {}

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def add(self, node: Node, parent_id: Optional[str] = None) -> str:
        if not node.id:
            node = replace(node, id=new_node_id(node.node_type))
        if node.id in self._nodes:
            raise ValueError(f"Node already exists: {node.id}")
        if parent_id is not None and parent_id not in self._nodes:
            raise NodeNotFoundError(parent_id)
        self._nodes[node.id] = node
        self._parents[node.id] = parent_id
        return node.id

    def get(self, node_id: str) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def find(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def update(self, node_id: str, **changes: Any) -> Node:
        node = replace(self.get(node_id), **changes)
        if node.id != node_id:
            raise ValueError("Node ids are immutable")
        self._nodes[node_id] = node
        return node

    def move(self, node_id: str, parent_id: Optional[str]) -> None:
        self.get(node_id)
        if parent_id is not None and parent_id not in self._nodes:
            raise NodeNotFoundError(parent_id)
        self._parents[node_id] = parent_id

    def delete(self, node_id: str) -> None:
        self.get(node_id)
        for child_id in [k for k, p in self._parents.items() if p == node_id]:
            self.delete(child_id)
        del self._nodes[node_id]
        del self._parents[node_id]

    def children(self, parent_id: Optional[str], node_type: Optional[str] = None) -> List[Node]:
        out = [self._nodes[k] for k, p in self._parents.items() if p == parent_id]
        if node_type is not None:
            out = [n for n in out if n.node_type == node_type]
        return out

    def descendants(self, parent_id: str, node_type: Optional[str] = None) -> List[Node]:
        out: List[Node] = []
        for child in self.children(parent_id):
            if node_type is None or child.node_type == node_type:
                out.append(child)
            out.extend(self.descendants(child.id, node_type))
        return out

    def parent_of(self, node_id: str) -> Optional[str]:
        self.get(node_id)
        return self._parents[node_id]

    def floor_of(self, node_id: str) -> Optional[Floor]:
        current: Optional[str] = node_id
        while current is not None:
            node = self.get(current)
            if isinstance(node, Floor):
                return node
            current = self._parents[current]
        return None

    def items(self) -> List[Tuple[str, Node]]:
        return list(self._nodes.items())

    def snapshot(self, label: str = "") -> StoreSnapshot:
        return StoreSnapshot(nodes=deepcopy(self._nodes), parents=dict(self._parents), label=label)

    def restore(self, snapshot: StoreSnapshot) -> None:
        self._nodes = deepcopy(snapshot.nodes)
        self._parents = dict(snapshot.parents)
