from insforge.exceptions import InvalidURLError


class _RealtimeCore:
    ENDPOINT = "/api/realtime"

    @classmethod
    def socket_url(cls, base_url: str) -> str:
        """``http(s)://host`` -> ``ws(s)://host/api/realtime``."""
        base = base_url.rstrip("/")
        if base.startswith("https://"):
            return "wss://" + base[len("https://"):] + cls.ENDPOINT
        if base.startswith("http://"):
            return "ws://" + base[len("http://"):] + cls.ENDPOINT
        if base.startswith(("ws://", "wss://")):
            return base + cls.ENDPOINT
        raise InvalidURLError(f"Cannot derive realtime URL from '{base_url}'")
