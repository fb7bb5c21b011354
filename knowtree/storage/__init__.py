"""
Knowledge Storage Layer

RESPONSIBILITY: Owner-scoped node and edge records
ALLOWED INPUTS: Create/update/delete requests carrying the acting owner
OUTPUTS: GraphSnapshot, Result-wrapped records

WHAT THIS LAYER MUST NOT DO:
============================
- Decide whether an edge is legal (that is the validator's job)
- Compute roles or positions

Every operation checks that the acting owner owns the referenced
node(s). Deleting a node removes every edge touching it.
"""

from __future__ import annotations
from typing import Dict, List, Optional

from ..contracts.base import Error, ErrorCode, Result, Timestamp, generate_id
from ..contracts.graph import EdgeRecord, GraphSnapshot, NodeRecord, RelationKind


class StorageBackend:
    """
    Abstract storage interface.
    Implementations must be owner-scoped and cascade node deletion.
    """

    def list_nodes(self, owner_id: str) -> GraphSnapshot:
        raise NotImplementedError

    def create_node(self, owner_id: str, title: str, content: str = "") -> Result:
        raise NotImplementedError

    def update_node(
        self,
        owner_id: str,
        node_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None
    ) -> Result:
        raise NotImplementedError

    def delete_node(self, owner_id: str, node_id: str) -> Result:
        raise NotImplementedError

    def create_edge(
        self,
        owner_id: str,
        from_node_id: str,
        to_node_id: str,
        kind: RelationKind,
        weight: float = 1.0
    ) -> Result:
        raise NotImplementedError

    def delete_edge(self, owner_id: str, edge_id: str) -> Result:
        raise NotImplementedError


class KnowledgeStore(StorageBackend):
    """
    In-memory store.

    Ids are derived from the owner, a sequence number and the record
    content, so a replayed sequence of calls yields the same ids.
    """

    def __init__(self):
        self._nodes: Dict[str, NodeRecord] = {}
        self._edges: Dict[str, EdgeRecord] = {}
        self._sequence = 0

    def _next_sequence(self) -> str:
        self._sequence += 1
        return str(self._sequence)

    def _owned_node(self, owner_id: str, node_id: str) -> Optional[NodeRecord]:
        node = self._nodes.get(node_id)
        if node is None or node.owner_id != owner_id:
            return None
        return node

    # =========================================================================
    # QUERIES
    # =========================================================================

    def list_nodes(self, owner_id: str) -> GraphSnapshot:
        """The owner's nodes, newest first, with every edge between them."""
        owned = [n for n in self._nodes.values() if n.owner_id == owner_id]
        # Insertion order breaks ties between identical timestamps
        order = {nid: i for i, nid in enumerate(self._nodes)}
        owned.sort(key=lambda n: (n.created_at.value, order[n.node_id]), reverse=True)

        owned_ids = {n.node_id for n in owned}
        edges = [
            e for e in self._edges.values()
            if e.from_node_id in owned_ids or e.to_node_id in owned_ids
        ]
        return GraphSnapshot.of(owned, edges)

    def get_node(self, owner_id: str, node_id: str) -> Result:
        node = self._owned_node(owner_id, node_id)
        if node is None:
            return Result.failure(Error.create(ErrorCode.NODE_NOT_FOUND, "Node not found"))
        return Result.success(node)

    # =========================================================================
    # NODE MUTATIONS
    # =========================================================================

    def create_node(self, owner_id: str, title: str, content: str = "") -> Result:
        if not owner_id:
            return Result.failure(Error.create(ErrorCode.UNAUTHORIZED, "No acting owner"))
        if not title or not title.strip():
            return Result.failure(Error.create(ErrorCode.INVALID_INPUT, "Title must be non-empty"))

        node = NodeRecord(
            node_id=generate_id("node", owner_id, self._next_sequence(), title),
            title=title,
            content=content,
            created_at=Timestamp.now(),
            owner_id=owner_id,
        )
        self._nodes[node.node_id] = node
        return Result.success(node)

    def update_node(
        self,
        owner_id: str,
        node_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None
    ) -> Result:
        node = self._owned_node(owner_id, node_id)
        if node is None:
            return Result.failure(
                Error.create(ErrorCode.NODE_NOT_FOUND, "Node not found or unauthorized")
            )
        if title is not None and not title.strip():
            return Result.failure(Error.create(ErrorCode.INVALID_INPUT, "Title must be non-empty"))

        updated = NodeRecord(
            node_id=node.node_id,
            title=title if title is not None else node.title,
            content=content if content is not None else node.content,
            created_at=node.created_at,
            owner_id=node.owner_id,
        )
        self._nodes[node_id] = updated
        return Result.success(updated)

    def delete_node(self, owner_id: str, node_id: str) -> Result:
        node = self._owned_node(owner_id, node_id)
        if node is None:
            return Result.failure(
                Error.create(ErrorCode.NODE_NOT_FOUND, "Node not found or unauthorized")
            )

        removed: List[EdgeRecord] = [
            e for e in self._edges.values()
            if node_id in (e.from_node_id, e.to_node_id)
        ]
        for edge in removed:
            del self._edges[edge.edge_id]
        del self._nodes[node_id]
        return Result.success(node)

    # =========================================================================
    # EDGE MUTATIONS
    # =========================================================================

    def create_edge(
        self,
        owner_id: str,
        from_node_id: str,
        to_node_id: str,
        kind: RelationKind,
        weight: float = 1.0
    ) -> Result:
        if (self._owned_node(owner_id, from_node_id) is None
                or self._owned_node(owner_id, to_node_id) is None):
            return Result.failure(
                Error.create(ErrorCode.NODE_NOT_FOUND, "One or both nodes not found")
            )
        if weight <= 0:
            return Result.failure(Error.create(ErrorCode.INVALID_INPUT, "Weight must be positive"))

        edge = EdgeRecord(
            edge_id=generate_id("edge", owner_id, self._next_sequence(), from_node_id, to_node_id),
            from_node_id=from_node_id,
            to_node_id=to_node_id,
            kind=kind,
            weight=weight,
        )
        self._edges[edge.edge_id] = edge
        return Result.success(edge)

    def delete_edge(self, owner_id: str, edge_id: str) -> Result:
        edge = self._edges.get(edge_id)
        # Ownership follows the edge's source node
        if edge is None or self._owned_node(owner_id, edge.from_node_id) is None:
            return Result.failure(
                Error.create(ErrorCode.EDGE_NOT_FOUND, "Edge not found or unauthorized")
            )
        del self._edges[edge_id]
        return Result.success(edge)


__all__ = ['StorageBackend', 'KnowledgeStore']
