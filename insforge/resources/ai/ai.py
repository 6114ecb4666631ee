"""/api/ai endpoints."""
from __future__ import annotations

from typing import Any

from insforge.models.ai import (
    AIModel,
    ChatCompletionResponse,
    ChatMessage,
    FileParserPlugin,
    ImageGenerationResponse,
    ListModelsResponse,
    WebSearchPlugin,
    plugin_payload,
)
from insforge.resources.ai.ai_core import _AICore
from insforge.resources.base import BaseAsyncResource, to_json_body
from insforge.utils.logging import logger


class AIClient(BaseAsyncResource, _AICore):
    """Chat completion and image generation."""

    async def chat_completion(
        self,
        model: str,
        messages: list[ChatMessage | dict[str, Any]],
        stream: bool = False,
        temperature: float | None = None,
        max_tokens: int | None = None,
        top_p: float | None = None,
        system_prompt: str | None = None,
        web_search: WebSearchPlugin | dict[str, Any] | None = None,
        file_parser: FileParserPlugin | dict[str, Any] | None = None,
        thinking: bool | None = None,
    ) -> ChatCompletionResponse:
        """
        Generate a chat completion.

        :param model: provider model identifier, e.g. ``"openai/gpt-4"``.
        :param messages: conversation so far.
        :param temperature: randomness, 0-2.
        :param top_p: nucleus sampling, 0-1.
        :param web_search: web search plugin configuration.
        :param file_parser: PDF parsing plugin configuration.
        :param thinking: extended reasoning (Anthropic models only).
        :return: the completion.
        """
        body: dict[str, Any] = {
            "model": model,
            "messages": to_json_body(messages),
            "stream": stream,
        }
        optional = {
            "temperature": temperature,
            "maxTokens": max_tokens,
            "topP": top_p,
            "systemPrompt": system_prompt,
            "thinking": thinking,
        }
        body.update({k: v for k, v in optional.items() if v is not None})
        if web_search is not None:
            body["webSearch"] = plugin_payload(web_search)
        if file_parser is not None:
            body["fileParser"] = plugin_payload(file_parser)

        resp = await self._t.arequest("POST", f"{self.ENDPOINT}/chat/completion", json=body)
        result = self._decode(resp, ChatCompletionResponse)
        logger.debug(f"Chat completion received ({len(result.text)} chars)")
        return result

    async def generate_image(self, model: str, prompt: str) -> ImageGenerationResponse:
        resp = await self._t.arequest(
            "POST", f"{self.ENDPOINT}/image/generation", json={"model": model, "prompt": prompt}
        )
        result = self._decode(resp, ImageGenerationResponse)
        logger.debug(f"Generated {result.image_count} image(s)")
        return result

    async def list_models(self) -> ListModelsResponse:
        """List configured models grouped by output modality and provider."""
        resp = await self._t.arequest("GET", f"{self.ENDPOINT}/models")
        models = self._decode(resp, list[AIModel])
        result = self._parse_models(models)
        logger.debug(f"Listed {len(models)} model(s)")
        return result
