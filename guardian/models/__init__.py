from .location import LocationPoint

__all__ = ["LocationPoint"]
