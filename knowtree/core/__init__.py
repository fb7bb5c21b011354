"""
Core Relationship Engine

RESPONSIBILITY: Role resolution, hierarchy topology, edge validation
ALLOWED INPUTS: GraphSnapshot and proposed links
OUTPUTS: RoleMap, ParentForest, EdgeDecision

WHAT THIS LAYER MUST NOT DO:
============================
- Persist or mutate nodes and edges
- Compute positions or colours
"""

from .roles import (
    HierarchyRole, SatelliteRole, NodeRole, RoleMap, TerminalScope,
    partition_roles, parent_degree, structural_degree,
    is_isolated, is_terminal, has_parent,
)
from .topology import ParentForest, ForestMetrics, parent_links, reaches_ancestor
from .validator import RelationshipValidator, ValidatorConfig, validate_proposed_edge

__all__ = [
    'HierarchyRole', 'SatelliteRole', 'NodeRole', 'RoleMap', 'TerminalScope',
    'partition_roles', 'parent_degree', 'structural_degree',
    'is_isolated', 'is_terminal', 'has_parent',
    'ParentForest', 'ForestMetrics', 'parent_links', 'reaches_ancestor',
    'RelationshipValidator', 'ValidatorConfig', 'validate_proposed_edge',
]
