"""Domain and wire models for the launchpad."""

from launchpad.models.config import (
    DEFAULT_CURVE_PARAMS,
    CurveParams,
    GlobalConfig,
    GraduationPolicy,
)
from launchpad.models.curve import (
    BondingCurve,
    BuyMode,
    CompletionSnapshot,
    LifecycleState,
    TokenMetadata,
)
from launchpad.models.types import U64, Address, Identity, derive_address, validate_u64

__all__ = [
    # Curve
    "BondingCurve",
    "BuyMode",
    "CompletionSnapshot",
    "LifecycleState",
    "TokenMetadata",
    # Config
    "CurveParams",
    "DEFAULT_CURVE_PARAMS",
    "GlobalConfig",
    "GraduationPolicy",
    # Types
    "Address",
    "Identity",
    "U64",
    "derive_address",
    "validate_u64",
]
