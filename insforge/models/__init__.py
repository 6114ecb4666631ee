from .ai import (
    AIModel,
    ChatCompletionResponse,
    ChatMessage,
    FileParserPlugin,
    ImageGenerationResponse,
    ListModelsResponse,
    ModelProvider,
    PDFConfig,
    Role,
    TokenUsage,
    WebSearchPlugin,
)
from .auth import AuthResponse, Profile, Session, User
from .base import APIModel, Record
from .realtime import BroadcastMessage, Channel, RealtimeMessage
from .storage import BucketInfo, DownloadStrategy, ListResponse, StoredFile, UploadStrategy

__all__ = [
    "AIModel",
    "APIModel",
    "AuthResponse",
    "BroadcastMessage",
    "BucketInfo",
    "Channel",
    "ChatCompletionResponse",
    "ChatMessage",
    "DownloadStrategy",
    "FileParserPlugin",
    "ImageGenerationResponse",
    "ListModelsResponse",
    "ListResponse",
    "ModelProvider",
    "PDFConfig",
    "Profile",
    "RealtimeMessage",
    "Record",
    "Role",
    "Session",
    "StoredFile",
    "TokenUsage",
    "UploadStrategy",
    "User",
    "WebSearchPlugin",
]
