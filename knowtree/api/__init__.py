"""
Payload boundary: pydantic schemas for the node query wire format and
the mappers between payloads, contracts and JSON-ready output.
"""

from .schemas import EdgePayload, NodePayload, SnapshotPayload, CameraPayload
from .mapper import (
    snapshot_from_payload, parse_snapshot, parse_camera,
    decision_to_dict, layout_to_dict,
)

__all__ = [
    'EdgePayload', 'NodePayload', 'SnapshotPayload', 'CameraPayload',
    'snapshot_from_payload', 'parse_snapshot', 'parse_camera',
    'decision_to_dict', 'layout_to_dict',
]
