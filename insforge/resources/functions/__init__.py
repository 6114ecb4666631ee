from .functions import FunctionsClient

__all__ = ["FunctionsClient"]
