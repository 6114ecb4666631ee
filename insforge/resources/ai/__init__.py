from .ai import AIClient

__all__ = ["AIClient"]
