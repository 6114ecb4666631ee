from .realtime import RealtimeChannel, RealtimeClient

__all__ = ["RealtimeChannel", "RealtimeClient"]
