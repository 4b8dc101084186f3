from .lookup import Lookup

__all__ = ["Lookup"]
