"""Typed client for OpenAI-compatible HTTP APIs."""

__version__ = "0.1.0"

from .client import AsyncOpenAI, AsyncResult, OpenAI
from .config import OpenAIConfig, Timeout
from .core.builders import (
    ChatCompletionRequestBuilder,
    ChatMessageBuilder,
    ChatMessagesBuilder,
    CompletionRequestBuilder,
    EditsRequestBuilder,
    EmbeddingRequestBuilder,
    FileUploadBuilder,
    FineTuneRequestBuilder,
    ImageCreationBuilder,
    ImageEditBuilder,
    ImageVariationBuilder,
    ModerationRequestBuilder,
    chat_completion_request,
)
from .core.errors import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    BuildError,
    ConfigurationError,
    InternalServerError,
    MissingFieldError,
    NotFoundError,
    OpenAIError,
    PermissionDeniedError,
    RateLimitError,
    TransportError,
)
from .core.models import (
    ChatChoice,
    ChatCompletion,
    Edit,
    Embedding,
    EmbeddingResponse,
    File,
    FineTune,
    FineTuneEvent,
    ImageJSON,
    ImageURL,
    Model,
    ModerationResponse,
    ModerationResult,
    TextCompletion,
    Usage,
)
from .core.payloads import (
    NOT_GIVEN,
    ChatCompletionFunction,
    ChatCompletionRequest,
    ChatMessage,
    ChatRole,
    CompletionRequest,
    EditsRequest,
    EmbeddingRequest,
    FileSource,
    FileUpload,
    FineTuneRequest,
    FunctionCall,
    ImageCreation,
    ImageEdit,
    ImageVariation,
    ModerationRequest,
)
from .utils.log import Logger, LogLevel, setup_logging
from .utils.retry import with_retry
