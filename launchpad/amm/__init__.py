"""Bonding curve pricing implementations."""

from launchpad.amm.base import CurveSwap, PricingCurve
from launchpad.amm.constant_product import ConstantProductCurve, constant_product

__all__ = [
    "CurveSwap",
    "PricingCurve",
    "ConstantProductCurve",
    "constant_product",
]
