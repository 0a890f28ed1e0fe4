"""Input bundle repositories."""

from nsink.repositories.bundle import BundleRepository

__all__ = ["BundleRepository"]
