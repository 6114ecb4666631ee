from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field

from insforge.models.base import APIModel


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(APIModel):
    role: Role
    content: str


class WebSearchPlugin(APIModel):
    enabled: bool = True
    engine: str | None = None  # "native" or "exa"
    max_results: int | None = None
    search_prompt: str | None = None


class PDFConfig(APIModel):
    engine: str | None = None  # "pdf-text", "mistral-ocr" or "native"


class FileParserPlugin(APIModel):
    enabled: bool = True
    pdf: PDFConfig | None = None


class TokenUsage(APIModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class UrlCitation(APIModel):
    url: str
    title: str | None = None
    content: str | None = None
    start_index: int | None = None
    end_index: int | None = None


class UrlCitationAnnotation(APIModel):
    type: str
    url_citation: UrlCitation | None = None


class CompletionMetadata(APIModel):
    model: str
    usage: TokenUsage | None = None


class ChatCompletionResponse(APIModel):
    text: str
    annotations: list[UrlCitationAnnotation] | None = None
    metadata: CompletionMetadata | None = None

    @property
    def content(self) -> str:
        return self.text

    @property
    def success(self) -> bool:
        return bool(self.text)


class ImageMessage(APIModel):
    type: str
    image_url: str

    @property
    def url(self) -> str:
        return self.image_url


class ImageMetadata(APIModel):
    model: str
    revised_prompt: str | None = None
    usage: TokenUsage | None = None


class ImageGenerationResponse(APIModel):
    model: str | None = None
    images: list[ImageMessage] = Field(default_factory=list)
    text: str | None = None
    count: int | None = None
    metadata: ImageMetadata | None = None

    @property
    def image_count(self) -> int:
        return self.count if self.count is not None else len(self.images)


class AIModel(APIModel):
    id: str
    model_id: str
    provider: str
    input_modality: list[str] = Field(default_factory=list)
    output_modality: list[str] = Field(default_factory=list)
    price_level: int = 0

    @property
    def name(self) -> str:
        return self.id


class ModelProvider(APIModel):
    provider: str
    configured: bool
    models: list[AIModel]


class ListModelsResponse(APIModel):
    text: list[ModelProvider]
    image: list[ModelProvider]


def plugin_payload(plugin: APIModel | dict[str, Any]) -> dict[str, Any]:
    if isinstance(plugin, dict):
        return plugin
    return plugin.model_dump(mode="json", by_alias=True, exclude_none=True)
