"""
Relationship Validator
======================

Decides whether a proposed link is legal for the current snapshot and,
when it is, returns the edge in its stored direction.

RULES (first failure wins):
===========================
1. Both endpoints must exist in the snapshot
2. No self-loops
3. Terminal nodes (annotation nodes) accept no further edges
4. Parent/child: at most one parent per node, no cycles
5. Annotations: at least one endpoint must be isolated

The validator is a pure decision function. It never mutates the
snapshot; persistence is the caller's job.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union

from ..contracts.graph import GraphSnapshot, LinkIntent, RelationKind
from ..contracts.decisions import Accepted, Rejected, RejectionReason, EdgeDecision
from .roles import TerminalScope, is_isolated, is_terminal, has_parent
from .topology import parent_links, reaches_ancestor


MESSAGES = {
    RejectionReason.UNKNOWN_NODE: "One or both nodes not found.",
    RejectionReason.SELF_LOOP: "A node cannot be linked to itself.",
    RejectionReason.SINGLE_PARENT: "This node already has a parent. A node can only have one parent.",
    RejectionReason.CYCLE: "This would create a circular relationship. Not allowed.",
}


@dataclass
class ValidatorConfig:
    """Configuration for the relationship validator."""
    terminal_scope: TerminalScope = TerminalScope.INCIDENT


class RelationshipValidator:
    """
    Applies the relationship rules to a proposed link.

    Stateless apart from its configuration; safe to share.
    """

    def __init__(self, config: Optional[ValidatorConfig] = None):
        self._config = config or ValidatorConfig()

    @property
    def config(self) -> ValidatorConfig:
        return self._config

    def validate(
        self,
        snapshot: GraphSnapshot,
        from_id: str,
        to_id: str,
        intent: Union[LinkIntent, str]
    ) -> EdgeDecision:
        """
        Decide on linking from_id -> to_id with the given intent.

        Returns Accepted with the normalized (from, to, kind) triple, or
        Rejected with a reason and a message fit for the user.
        """
        if isinstance(intent, str):
            intent = LinkIntent.parse(intent)

        if not snapshot.has_node(from_id) or not snapshot.has_node(to_id):
            return self._reject(RejectionReason.UNKNOWN_NODE)

        if from_id == to_id:
            return self._reject(RejectionReason.SELF_LOOP)

        scope = self._config.terminal_scope
        if is_terminal(snapshot, from_id, scope):
            return Rejected(
                RejectionReason.TERMINAL_NODE,
                "This node is already a reference/example/contradiction node "
                "and cannot have additional connections."
            )
        if is_terminal(snapshot, to_id, scope):
            return Rejected(
                RejectionReason.TERMINAL_NODE,
                "Target node is already a reference/example/contradiction node "
                "and cannot have additional connections."
            )

        if intent.is_hierarchical:
            return self._validate_hierarchy(snapshot, from_id, to_id, intent)
        return self._validate_annotation(snapshot, from_id, to_id, intent)

    def _validate_hierarchy(
        self,
        snapshot: GraphSnapshot,
        from_id: str,
        to_id: str,
        intent: LinkIntent
    ) -> EdgeDecision:
        if intent is LinkIntent.PARENT:
            parent_id, child_id = to_id, from_id
        else:
            parent_id, child_id = from_id, to_id

        if has_parent(snapshot, child_id):
            return self._reject(RejectionReason.SINGLE_PARENT)

        # The child must not already be an ancestor of the new parent
        if reaches_ancestor(parent_links(snapshot), parent_id, child_id):
            return self._reject(RejectionReason.CYCLE)

        return Accepted(from_node_id=parent_id, to_node_id=child_id, kind=RelationKind.PARENT)

    def _validate_annotation(
        self,
        snapshot: GraphSnapshot,
        from_id: str,
        to_id: str,
        intent: LinkIntent
    ) -> EdgeDecision:
        source_isolated = is_isolated(snapshot, from_id)
        target_isolated = is_isolated(snapshot, to_id)

        if not source_isolated and not target_isolated:
            return Rejected(
                RejectionReason.NOT_ISOLATED,
                f"Cannot create {intent.value} link: At least one node must be "
                "isolated (no parent/child relationships)."
            )

        # Stored as anchor -> satellite; both isolated keeps caller order
        if source_isolated and not target_isolated:
            from_id, to_id = to_id, from_id

        return Accepted(from_node_id=from_id, to_node_id=to_id, kind=intent.relation_kind)

    @staticmethod
    def _reject(reason: RejectionReason) -> Rejected:
        return Rejected(reason=reason, message=MESSAGES[reason])


_DEFAULT_VALIDATOR = RelationshipValidator()


def validate_proposed_edge(
    snapshot: GraphSnapshot,
    from_id: str,
    to_id: str,
    intent: Union[LinkIntent, str],
    config: Optional[ValidatorConfig] = None
) -> EdgeDecision:
    """Validate with a default validator, or one built from config."""
    validator = RelationshipValidator(config) if config else _DEFAULT_VALIDATOR
    return validator.validate(snapshot, from_id, to_id, intent)
