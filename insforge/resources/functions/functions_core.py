from urllib.parse import quote


class _FunctionsCore:
    ENDPOINT = "/functions"

    def function_path(self, slug: str) -> str:
        return f"{self.ENDPOINT}/{quote(slug, safe='')}"
