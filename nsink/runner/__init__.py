"""Removal pipeline execution.

- calc_removal(): Main entry point, bundle in, RemovalResult out

Estimators follow a simple pattern:
- Class attribute: required_layers (the bundle keys the estimator reads)
- Constructor: __init__(inputs, run_id, config)
- Run method: run() -> RemovalLayer
"""

from nsink.runner.runner import ESTIMATORS, calc_removal, estimator_slice, run_estimator

__all__ = [
    "ESTIMATORS",
    "calc_removal",
    "estimator_slice",
    "run_estimator",
]
