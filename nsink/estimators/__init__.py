"""Removal estimators, one per removal source."""

from nsink.estimators.lake import LakeRemovalEstimator
from nsink.estimators.land import LandRemovalEstimator
from nsink.estimators.network import network_vectors
from nsink.estimators.stream import StreamRemovalEstimator

__all__ = [
    "LakeRemovalEstimator",
    "LandRemovalEstimator",
    "StreamRemovalEstimator",
    "network_vectors",
]
