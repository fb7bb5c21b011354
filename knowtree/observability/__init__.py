"""
Observability Layer

RESPONSIBILITY: Record what the validator and layout did
ALLOWED INPUTS: Diagnostic entries from other layers
OUTPUTS: Read-only, append-only diagnostic log

WHAT THIS LAYER MUST NOT DO:
============================
- Modify system behavior
- Filter or interpret events (only record them)
- Make decisions based on recorded data

Dangling edges, fallback placements and residual overlaps are tolerated
by the layout without failing. This is where they become visible.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from enum import Enum

from ..contracts.base import Timestamp


class DiagnosticEventType(Enum):
    """Kinds of recorded events."""
    EDGE_ACCEPTED = "edge_accepted"
    EDGE_REJECTED = "edge_rejected"
    DANGLING_EDGE = "dangling_edge"
    FALLBACK_PLACEMENT = "fallback_placement"
    RESIDUAL_OVERLAP = "residual_overlap"
    CAMERA_FRAMED = "camera_framed"
    CAMERA_PRESERVED = "camera_preserved"


@dataclass(frozen=True)
class DiagnosticEntry:
    """One immutable diagnostic record."""
    event_type: DiagnosticEventType
    subject_id: str
    message: str
    recorded_at: Timestamp
    details: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def detail(self, key: str) -> Optional[str]:
        for k, v in self.details:
            if k == key:
                return v
        return None


@dataclass
class ObservabilityConfig:
    """Configuration for diagnostics collection."""
    enabled: bool = True


class DiagnosticsCollector:
    """
    Append-only collector of diagnostic entries.

    Entries are never modified or removed; readers get copies.
    """

    def __init__(self, config: Optional[ObservabilityConfig] = None):
        self._config = config or ObservabilityConfig()
        self._entries: List[DiagnosticEntry] = []

    def record(
        self,
        event_type: DiagnosticEventType,
        subject_id: str,
        message: str,
        **details: object
    ) -> None:
        if not self._config.enabled:
            return
        self._entries.append(DiagnosticEntry(
            event_type=event_type,
            subject_id=subject_id,
            message=message,
            recorded_at=Timestamp.now(),
            details=tuple((k, str(v)) for k, v in sorted(details.items())),
        ))

    def collect(self, entries: Tuple[DiagnosticEntry, ...]) -> None:
        """Absorb entries recorded elsewhere."""
        if not self._config.enabled:
            return
        self._entries.extend(entries)

    def get_entries(
        self,
        event_type: Optional[DiagnosticEventType] = None
    ) -> List[DiagnosticEntry]:
        entries = self._entries
        if event_type:
            entries = [e for e in entries if e.event_type == event_type]
        return list(entries)

    def snapshot(self) -> Tuple[DiagnosticEntry, ...]:
        return tuple(self._entries)
