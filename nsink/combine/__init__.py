"""Combination of per-source removal grids.

- merge_removal(): continuous removal surface
- classify_removal_type(): categorical removal type surface

Both share REMOVAL_PRECEDENCE and reconcile_layers().
"""

from nsink.combine.classify import classify_removal_type, recode_removal
from nsink.combine.merge import merge_removal
from nsink.combine.precedence import REMOVAL_PRECEDENCE, PrecedenceRule, reconcile_layers

__all__ = [
    "REMOVAL_PRECEDENCE",
    "PrecedenceRule",
    "classify_removal_type",
    "merge_removal",
    "recode_removal",
    "reconcile_layers",
]
