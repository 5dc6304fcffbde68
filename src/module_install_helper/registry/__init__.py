"""Registry clients."""

from .forge import ForgeClient

__all__ = ["ForgeClient"]
