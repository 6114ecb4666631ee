from urllib.parse import quote


class _DatabaseCore:
    ENDPOINT = "/api/database"

    def records_path(self, table: str) -> str:
        return f"{self.ENDPOINT}/records/{quote(table, safe='')}"
