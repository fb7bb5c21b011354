"""
Interaction Contracts

Responsibility:
Model the link-mode selection the UI is in when a frame is rendered.
No execution logic - just state the renderer reads.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LinkSelection:
    """
    Which nodes are highlighted as link endpoints.

    source_id is the node the user is linking from (or editing).
    target_id is the pending target, only meaningful in link mode.
    """
    link_mode: bool = False
    source_id: Optional[str] = None
    target_id: Optional[str] = None

    def is_source(self, node_id: str) -> bool:
        return self.source_id is not None and node_id == self.source_id

    def is_target(self, node_id: str) -> bool:
        return self.link_mode and self.target_id is not None and node_id == self.target_id

    def is_highlighted(self, node_id: str) -> bool:
        return self.is_source(node_id) or self.is_target(node_id)

    def with_target(self, node_id: str) -> LinkSelection:
        """Select a pending target. The source itself cannot be a target."""
        if node_id == self.source_id:
            return self
        return LinkSelection(link_mode=self.link_mode, source_id=self.source_id, target_id=node_id)


NO_SELECTION = LinkSelection()

__all__ = ['LinkSelection', 'NO_SELECTION']
