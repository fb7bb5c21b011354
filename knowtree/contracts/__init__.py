"""
Contracts shared by every layer.

All types are frozen. Layers import from here, never from each other's
implementations.
"""

from .base import ErrorCode, Error, Result, Timestamp, generate_id
from .graph import (
    RelationKind, LinkIntent, ANNOTATION_KINDS,
    NodeRecord, EdgeRecord, GraphSnapshot,
)
from .decisions import RejectionReason, Accepted, Rejected, EdgeDecision

__all__ = [
    'ErrorCode', 'Error', 'Result', 'Timestamp', 'generate_id',
    'RelationKind', 'LinkIntent', 'ANNOTATION_KINDS',
    'NodeRecord', 'EdgeRecord', 'GraphSnapshot',
    'RejectionReason', 'Accepted', 'Rejected', 'EdgeDecision',
]
