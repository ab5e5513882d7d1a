"""
Request models.

Every request is a frozen dataclass whose fields carry their wire name in the
field metadata. Optional fields default to ``NOT_GIVEN`` and are left out of
the payload entirely, so the service falls back to its own defaults.
"""

from __future__ import annotations

import os
from dataclasses import MISSING, dataclass, field, fields
from enum import Enum
from typing import Any, BinaryIO, Callable, Dict, Mapping, Optional, Sequence, Union


class NotGiven:
    """Marks an optional field that was never set."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "NOT_GIVEN"

    def __reduce__(self):
        return "NOT_GIVEN"


NOT_GIVEN = NotGiven()


def wire_field(name: str, *, required: bool = False, nullable: bool = False, decode: Callable = None):
    """Declare a dataclass field together with its wire name."""
    metadata = {"wire": name, "nullable": nullable, "decode": decode}
    if required:
        return field(metadata=metadata)
    # Optional fields may hold dicts, so only required fields feed the hash.
    return field(default=NOT_GIVEN, hash=False, metadata=metadata)


def _encode(value: Any) -> Any:
    if isinstance(value, WireModel):
        return value.to_wire()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _encode(item) for key, item in value.items()}
    return value


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(value)
    if isinstance(value, Mapping):
        return dict(value)
    return value


@dataclass(frozen=True)
class WireModel:
    """Base for request models: omit-if-absent encoding and decoding."""

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None and not f.metadata.get("nullable") and f.default is not MISSING:
                object.__setattr__(self, f.name, NOT_GIVEN)
            else:
                object.__setattr__(self, f.name, _freeze(value))

    def to_wire(self) -> Dict[str, Any]:
        """Encode to a JSON-ready dict, skipping every ``NOT_GIVEN`` field."""
        body = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is NOT_GIVEN:
                continue
            body[f.metadata.get("wire", f.name)] = _encode(value)
        return body

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]):
        """Decode a wire dict produced by ``to_wire`` (or by the service)."""
        values = {}
        for f in fields(cls):
            name = f.metadata.get("wire", f.name)
            if name not in data:
                continue
            value = data[name]
            decode = f.metadata.get("decode")
            if decode is not None and value is not None:
                value = decode(value)
            values[f.name] = value
        return cls(**values)

    @classmethod
    def new_builder(cls):
        """Return an empty builder for this request."""
        from .builders import builder_for
        return builder_for(cls)()


def _decode_list(model):
    return lambda items: [model.from_wire(item) for item in items]


# =============================================================================
# Chat
# =============================================================================

class ChatRole(str, Enum):
    """Author of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"


@dataclass(frozen=True)
class FunctionCall(WireModel):
    """A function invocation requested by the model."""

    name: str = wire_field("name")
    arguments: str = wire_field("arguments")


@dataclass(frozen=True)
class ChatMessage(WireModel):
    """One entry of a conversation.

    ``content`` may be explicitly ``None`` for assistant messages that only
    carry a ``function_call``; that is sent as ``null``. Leaving it unset omits
    the key.
    """

    role: ChatRole = wire_field("role", required=True, decode=ChatRole)
    content: Optional[str] = wire_field("content", nullable=True)
    name: str = wire_field("name")
    function_call: FunctionCall = wire_field("function_call", decode=FunctionCall.from_wire)

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.role, ChatRole):
            object.__setattr__(self, "role", ChatRole(self.role))


@dataclass(frozen=True)
class ChatCompletionFunction(WireModel):
    """A function the model may call; ``parameters`` is a JSON schema."""

    name: str = wire_field("name", required=True)
    description: str = wire_field("description")
    parameters: Mapping[str, Any] = wire_field("parameters")


@dataclass(frozen=True)
class ChatCompletionRequest(WireModel):
    """Creates a completion for a chat conversation.

    Documented ranges are enforced by the service, not here:
    ``temperature`` in [0, 2], ``top_p`` in [0, 1], ``n`` >= 1, at most four
    ``stop`` sequences, ``max_tokens`` >= 0, both penalties in [-2, 2] and
    ``logit_bias`` values in [-100, 100].
    """

    model: str = wire_field("model", required=True)
    messages: Sequence[ChatMessage] = wire_field("messages", required=True, decode=_decode_list(ChatMessage))
    temperature: float = wire_field("temperature")
    top_p: float = wire_field("top_p")
    n: int = wire_field("n")
    stop: Sequence[str] = wire_field("stop")
    max_tokens: int = wire_field("max_tokens")
    presence_penalty: float = wire_field("presence_penalty")
    frequency_penalty: float = wire_field("frequency_penalty")
    logit_bias: Mapping[str, int] = wire_field("logit_bias")
    user: str = wire_field("user")
    functions: Sequence[ChatCompletionFunction] = wire_field(
        "functions", decode=_decode_list(ChatCompletionFunction)
    )
    function_call: Union[str, Mapping[str, str]] = wire_field("function_call")


# =============================================================================
# Completions / Edits / Embeddings / Moderations
# =============================================================================

@dataclass(frozen=True)
class CompletionRequest(WireModel):
    """Creates a text completion for a prompt."""

    model: str = wire_field("model", required=True)
    prompt: Union[str, Sequence[str]] = wire_field("prompt")
    suffix: str = wire_field("suffix")
    max_tokens: int = wire_field("max_tokens")
    temperature: float = wire_field("temperature")
    top_p: float = wire_field("top_p")
    n: int = wire_field("n")
    logprobs: int = wire_field("logprobs")
    echo: bool = wire_field("echo")
    stop: Sequence[str] = wire_field("stop")
    presence_penalty: float = wire_field("presence_penalty")
    frequency_penalty: float = wire_field("frequency_penalty")
    best_of: int = wire_field("best_of")
    logit_bias: Mapping[str, int] = wire_field("logit_bias")
    user: str = wire_field("user")


@dataclass(frozen=True)
class EditsRequest(WireModel):
    """Creates a new edit for the provided input and instruction."""

    model: str = wire_field("model", required=True)
    instruction: str = wire_field("instruction", required=True)
    input: str = wire_field("input")
    temperature: float = wire_field("temperature")
    top_p: float = wire_field("top_p")
    n: int = wire_field("n")


@dataclass(frozen=True)
class EmbeddingRequest(WireModel):
    model: str = wire_field("model", required=True)
    input: Sequence[str] = wire_field("input", required=True)
    user: str = wire_field("user")


@dataclass(frozen=True)
class ModerationRequest(WireModel):
    input: Sequence[str] = wire_field("input", required=True)
    model: str = wire_field("model")


# =============================================================================
# Fine-tunes
# =============================================================================

@dataclass(frozen=True)
class FineTuneRequest(WireModel):
    """Starts a fine-tune job from uploaded training data."""

    training_file: str = wire_field("training_file", required=True)
    validation_file: str = wire_field("validation_file")
    model: str = wire_field("model")
    n_epochs: int = wire_field("n_epochs")
    batch_size: int = wire_field("batch_size")
    learning_rate_multiplier: float = wire_field("learning_rate_multiplier")
    prompt_loss_weight: float = wire_field("prompt_loss_weight")
    compute_classification_metrics: bool = wire_field("compute_classification_metrics")
    classification_n_classes: int = wire_field("classification_n_classes")
    classification_positive_class: str = wire_field("classification_positive_class")
    classification_betas: Sequence[float] = wire_field("classification_betas")
    suffix: str = wire_field("suffix")


# =============================================================================
# Multipart requests
# =============================================================================

@dataclass(frozen=True)
class FileSource:
    """A named blob to upload."""

    name: str
    content: Union[bytes, BinaryIO]

    @classmethod
    def from_path(cls, path: str) -> "FileSource":
        with open(path, "rb") as f:
            return cls(name=os.path.basename(path), content=f.read())

    def as_upload(self):
        """The ``(filename, content)`` tuple ``requests`` takes in ``files=``."""
        return self.name, self.content


@dataclass(frozen=True)
class FileUpload(WireModel):
    file: FileSource = wire_field("file", required=True)
    purpose: str = wire_field("purpose", required=True)


@dataclass(frozen=True)
class ImageCreation(WireModel):
    """Creates images from a prompt. ``size`` is one of 256x256, 512x512, 1024x1024."""

    prompt: str = wire_field("prompt", required=True)
    n: int = wire_field("n")
    size: str = wire_field("size")
    user: str = wire_field("user")


@dataclass(frozen=True)
class ImageEdit(WireModel):
    image: FileSource = wire_field("image", required=True)
    prompt: str = wire_field("prompt", required=True)
    mask: FileSource = wire_field("mask")
    n: int = wire_field("n")
    size: str = wire_field("size")
    user: str = wire_field("user")


@dataclass(frozen=True)
class ImageVariation(WireModel):
    image: FileSource = wire_field("image", required=True)
    n: int = wire_field("n")
    size: str = wire_field("size")
    user: str = wire_field("user")


def split_multipart(request: WireModel):
    """Split a multipart request into form ``fields`` and ``files``."""
    form, files = {}, {}
    for f in fields(request):
        value = getattr(request, f.name)
        if value is NOT_GIVEN or value is None:
            continue
        name = f.metadata.get("wire", f.name)
        if isinstance(value, FileSource):
            files[name] = value.as_upload()
        else:
            form[name] = str(_encode(value))
    return form, files
