"""
Payload Schemas
===============

Wire format of the node query the persistence collaborator returns:
each node carries its own edgesFrom / edgesTo lists. Field aliases keep
the camelCase names of that format.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EdgePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str = "reference"
    from_node_id: str = Field(alias="fromNodeId")
    to_node_id: str = Field(alias="toNodeId")
    weight: float = 1.0


class NodePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = Field(min_length=1)
    content: str = ""
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    edges_from: List[EdgePayload] = Field(default_factory=list, alias="edgesFrom")
    edges_to: List[EdgePayload] = Field(default_factory=list, alias="edgesTo")


class SnapshotPayload(BaseModel):
    nodes: List[NodePayload] = Field(default_factory=list)


class CameraPayload(BaseModel):
    x: float
    y: float
    ratio: float = Field(gt=0)
