"""
Shared type definitions for schemas.

Centralizes common type annotations used across the transcript and operation schemas.

Layering:
- This module provides FOUNDATION types (BaseStrictModel, PermissiveModel, LenientStr)
- transcript.py models the on-disk JSONL records (permissive, never fails on odd values)
- operations.py models the derived results handed to consumers (strict, frozen)
"""

from __future__ import annotations

from typing import Annotated

import pydantic

# ==============================================================================
# Base Strict Model (Foundation)
# ==============================================================================


class BaseStrictModel(pydantic.BaseModel):
    """
    Foundation strict model - derived result types inherit from this.

    Uses extra='forbid' to reject unknown fields - any field not modeled
    causes immediate validation failure (fail-fast).
    """

    model_config = pydantic.ConfigDict(
        extra='forbid',  # Reject unknown fields (fail-fast)
        strict=True,  # Strict type coercion
        frozen=True,  # Immutable after creation
    )


# ==============================================================================
# Permissive Model (Foundation)
# ==============================================================================


class PermissiveModel(pydantic.BaseModel):
    """
    Foundation permissive model for transcript records.

    Symmetry with BaseStrictModel:
    - BaseStrictModel: extra='forbid' (rejects unknown fields)
    - PermissiveModel: extra='allow' (accepts unknown fields)

    Transcript lines carry dozens of fields we never read. Only the handful
    the indexer needs are modeled; everything else rides along as extras.
    """

    model_config = pydantic.ConfigDict(
        extra='allow',  # Accept unknown fields (graceful fallback)
        frozen=True,  # Immutable after creation
    )


# ==============================================================================
# Lenient Scalars
# ==============================================================================


def _str_or_none(value: object) -> str | None:
    """Keep strings, collapse every other JSON value to None."""
    return value if isinstance(value, str) else None


LenientStr = Annotated[str | None, pydantic.BeforeValidator(_str_or_none)]
"""Optional string field that never fails validation: non-strings become None."""
