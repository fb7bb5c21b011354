"""
Knowledge Tree Core

Typed notes connected by constrained edges, validated and laid out as
a tree with satellite annotations.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Frozen nodes, edges, snapshots, decisions, errors-as-data

2. CORE (core/)
   - Responsibility: Roles, hierarchy topology, edge validation
   - MUST NOT: Persist data or compute positions

3. VISUALIZATION (visualization/)
   - Responsibility: Positions, visual encoding, camera framing
   - MUST NOT: Decide edge legality or keep state between calls

4. STORAGE (storage/)
   - Responsibility: Owner-scoped records, cascade deletion
   - MUST NOT: Validate relationships

5. OBSERVABILITY (observability/)
   - Responsibility: Append-only diagnostics
   - MUST NOT: Change behaviour

6. API (api/)
   - Responsibility: Wire payload parsing and JSON output

CONSTRAINTS ENFORCED:
=====================
- Immutability-first: contracts are frozen
- Deterministic: identical snapshots give identical layouts
  (fallback placements draw from an injected generator)
- Explicit errors: rejections and store failures are data
"""

from .core.validator import validate_proposed_edge
from .visualization.pipeline import compute_layout
from .engine import KnowledgeTreeBackend, EngineConfig

__version__ = "0.1.0"

__all__ = [
    'validate_proposed_edge', 'compute_layout',
    'KnowledgeTreeBackend', 'EngineConfig',
]
