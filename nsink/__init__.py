"""Nitrogen removal core for N-Sink watershed analyses.

Combines land (hydric soil), stream and lake removal models into a
continuous removal surface and a categorical removal-type surface.
"""

__version__ = "0.1.0"
