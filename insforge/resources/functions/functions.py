"""/functions endpoints."""
from __future__ import annotations

from typing import Any

from pydantic import JsonValue

from insforge.resources.base import BaseAsyncResource, to_json_body
from insforge.resources.functions.functions_core import _FunctionsCore
from insforge.utils.logging import logger


class FunctionsClient(BaseAsyncResource, _FunctionsCore):
    """Invoke serverless functions deployed on the backend."""

    async def invoke(self, slug: str, body: Any = None, model: Any = JsonValue) -> Any:
        """
        Invoke the function ``slug`` with a JSON body.

        :param slug: function name as deployed.
        :param body: any JSON value (dict, list, scalar) or a pydantic model.
        :param model: type to decode the response into. Defaults to a plain
            JSON value; an empty response decodes to ``None``.
        :return: the decoded response.
        """
        resp = await self._t.arequest(
            "POST",
            self.function_path(slug),
            json=to_json_body(body) if body is not None else None,
            headers={"Content-Type": "application/json"},
        )
        resp.raise_for_status()
        logger.debug(f"Function '{slug}' invoked")
        if not resp.content.strip():
            return None
        return resp.decode(model)
