"""External service clients."""

from .imagen import ImagenClient, ImagenError

__all__ = ["ImagenClient", "ImagenError"]
