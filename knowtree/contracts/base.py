"""
Base Contracts and Shared Types

These are the foundational types used across all layers.
All types here are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- All types are frozen dataclasses for immutability guarantee
- Errors are data, never exceptions crossing layer boundaries
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple
from enum import Enum, auto
import hashlib


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for deterministic error handling.
    Every recoverable failure of the store and facade is enumerated.
    """
    # Store errors
    NODE_NOT_FOUND = auto()
    EDGE_NOT_FOUND = auto()
    UNAUTHORIZED = auto()
    INVALID_INPUT = auto()

    # Relationship errors
    EDGE_REJECTED = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and queried.
    """
    code: ErrorCode
    message: str
    timestamp: datetime
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @staticmethod
    def create(code: ErrorCode, message: str) -> Error:
        return Error(code=code, message=message, timestamp=datetime.now(timezone.utc))

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            timestamp=self.timestamp,
            context=self.context + ((key, value),)
        )

    def context_value(self, key: str) -> Optional[str]:
        for k, v in self.context:
            if k == key:
                return v
        return None


@dataclass(frozen=True)
class Result:
    """
    Generic result type for operations that can fail.
    Either contains a value OR an error, never both.
    """
    value: Optional[object] = None
    error: Optional[Error] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @staticmethod
    def success(value: object) -> Result:
        return Result(value=value, error=None)

    @staticmethod
    def failure(error: Error) -> Result:
        return Result(value=None, error=error)


# =============================================================================
# IDENTITY & TEMPORAL TYPES
# =============================================================================

def generate_id(prefix: str, *parts: str) -> str:
    """Generate a deterministic identifier from its seed parts."""
    seed = "|".join(parts)
    digest = hashlib.sha256(seed.encode('utf-8')).hexdigest()[:12]
    return f"{prefix}_{digest}"


@dataclass(frozen=True)
class Timestamp:
    """
    Immutable timestamp with explicit semantics.
    All timestamps are UTC, never local time.
    """
    value: datetime

    def __post_init__(self):
        # Ensure UTC timezone
        if self.value.tzinfo is None:
            object.__setattr__(self, 'value', self.value.replace(tzinfo=timezone.utc))

    @staticmethod
    def now() -> Timestamp:
        return Timestamp(value=datetime.now(timezone.utc))
