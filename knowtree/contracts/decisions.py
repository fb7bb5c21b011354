"""
Edge Decision Contracts

The validator's output: either an Accepted edge, normalized and ready
for persistence, or a Rejected proposal with its reason.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union
from enum import Enum

from .graph import RelationKind


class RejectionReason(Enum):
    """Why a proposed edge was refused."""
    UNKNOWN_NODE = "unknown_node"
    SELF_LOOP = "self_loop"
    TERMINAL_NODE = "terminal_node"
    SINGLE_PARENT = "single_parent"
    CYCLE = "cycle"
    NOT_ISOLATED = "not_isolated"


@dataclass(frozen=True)
class Accepted:
    """Normalized edge triple for the store."""
    from_node_id: str
    to_node_id: str
    kind: RelationKind

    @property
    def accepted(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """Refused proposal. No state changes."""
    reason: RejectionReason
    message: str

    @property
    def accepted(self) -> bool:
        return False


EdgeDecision = Union[Accepted, Rejected]
