"""
Engine Orchestration Module

Unified interface over the store, the validator and the layout.

DESIGN PRINCIPLES:
==================
1. Layers communicate ONLY through contracts
2. Every link goes through the validator before it reaches the store
3. Layout always runs over the latest full snapshot
4. The camera is threaded through render() by the caller
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Union
import os
import random

from .contracts.base import Error, ErrorCode, Result
from .contracts.graph import LinkIntent
from .core.roles import TerminalScope
from .core.validator import RelationshipValidator, ValidatorConfig
from .interaction import LinkSelection, NO_SELECTION
from .observability import (
    DiagnosticsCollector, DiagnosticEntry, DiagnosticEventType, ObservabilityConfig
)
from .storage import KnowledgeStore, StorageBackend
from .visualization.camera import Camera, CameraConfig
from .visualization.layout import LayoutConfig
from .visualization.pipeline import LayoutResult, compute_layout


ENV_PREFIX = "KNOWTREE_"


@dataclass
class EngineConfig:
    """Unified configuration for every layer."""
    validator: ValidatorConfig = None
    layout: LayoutConfig = None
    camera: CameraConfig = None
    observability: ObservabilityConfig = None

    def __post_init__(self):
        self.validator = self.validator or ValidatorConfig()
        self.layout = self.layout or LayoutConfig()
        self.camera = self.camera or CameraConfig()
        self.observability = self.observability or ObservabilityConfig()

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Defaults, overridden by KNOWTREE_* environment variables."""
        config = cls()

        scope = os.environ.get(f"{ENV_PREFIX}TERMINAL_SCOPE")
        if scope:
            config.validator.terminal_scope = TerminalScope(scope)

        width = os.environ.get(f"{ENV_PREFIX}VIEWPORT_WIDTH")
        if width:
            config.camera.viewport_width = float(width)

        height = os.environ.get(f"{ENV_PREFIX}VIEWPORT_HEIGHT")
        if height:
            config.camera.viewport_height = float(height)

        seed = os.environ.get(f"{ENV_PREFIX}FALLBACK_SEED")
        if seed:
            config.layout.fallback_seed = int(seed)

        return config


class KnowledgeTreeBackend:
    """
    Unified backend for one knowledge-tree deployment.

    FLOW:
    =====
    1. link_nodes: snapshot -> validator -> store
    2. render: snapshot -> layout -> view + camera
    3. Diagnostics from both land in one collector
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        store: Optional[StorageBackend] = None
    ):
        self._config = config or EngineConfig()
        self._store = store or KnowledgeStore()
        self._validator = RelationshipValidator(self._config.validator)
        self._diagnostics = DiagnosticsCollector(self._config.observability)
        self._rng = random.Random(self._config.layout.fallback_seed)

    @property
    def store(self) -> StorageBackend:
        return self._store

    @property
    def config(self) -> EngineConfig:
        return self._config

    def link_nodes(
        self,
        owner_id: str,
        from_id: str,
        to_id: str,
        intent: Union[LinkIntent, str],
        weight: float = 1.0
    ) -> Result:
        """
        Validate a proposed link and persist it on acceptance.

        A rejection is returned as an EDGE_REJECTED failure whose context
        carries the rejection reason.
        """
        snapshot = self._store.list_nodes(owner_id)
        decision = self._validator.validate(snapshot, from_id, to_id, intent)

        if not decision.accepted:
            self._diagnostics.record(
                DiagnosticEventType.EDGE_REJECTED,
                f"{from_id}->{to_id}",
                decision.message,
                reason=decision.reason.value,
            )
            error = Error.create(ErrorCode.EDGE_REJECTED, decision.message)
            return Result.failure(error.with_context("reason", decision.reason.value))

        result = self._store.create_edge(
            owner_id,
            decision.from_node_id,
            decision.to_node_id,
            decision.kind,
            weight,
        )
        if result.is_success:
            self._diagnostics.record(
                DiagnosticEventType.EDGE_ACCEPTED,
                result.value.edge_id,
                "Edge created",
                kind=decision.kind.value,
            )
        return result

    def render(
        self,
        owner_id: str,
        previous_camera: Optional[Camera] = None,
        selection: LinkSelection = NO_SELECTION
    ) -> LayoutResult:
        """Lay out the owner's current snapshot."""
        result = compute_layout(
            self._store.list_nodes(owner_id),
            previous_camera=previous_camera,
            selection=selection,
            rng=self._rng,
            layout_config=self._config.layout,
            camera_config=self._config.camera,
        )
        self._diagnostics.collect(result.diagnostics)
        return result

    def get_diagnostics(
        self,
        event_type: Optional[DiagnosticEventType] = None
    ) -> List[DiagnosticEntry]:
        return self._diagnostics.get_entries(event_type)
