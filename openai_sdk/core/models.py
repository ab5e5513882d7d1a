"""Response models and the functions that decode them from JSON."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import TransportError
from .payloads import ChatMessage, ChatRole, FunctionCall

# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class BaseModel:
    """Base model with dict-like access and serialization."""

    def __getitem__(self, key):
        try:
            return getattr(self, key)
        except AttributeError:
            raise KeyError(key) from None

    def get(self, key, default=None):
        return getattr(self, key, default)

    def to_dict(self) -> dict:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            result[f.name] = _to_plain(value)
        return result


def _to_plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.to_dict()
    if hasattr(value, "to_wire"):
        return value.to_wire()
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


@dataclass(frozen=True)
class Usage(BaseModel):
    """Token usage information."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class ChatChoice(BaseModel):
    index: int = 0
    message: Optional[ChatMessage] = None
    finish_reason: Optional[str] = None


@dataclass(frozen=True)
class ChatCompletion(BaseModel):
    """Represents a chat completion response."""

    id: Optional[str] = None
    object: str = "chat.completion"
    created: Optional[int] = None
    model: Optional[str] = None
    choices: Tuple[ChatChoice, ...] = ()
    usage: Optional[Usage] = None


@dataclass(frozen=True)
class Logprobs(BaseModel):
    tokens: Tuple[str, ...] = ()
    token_logprobs: Tuple[float, ...] = ()
    top_logprobs: Tuple[Dict[str, float], ...] = ()
    text_offset: Tuple[int, ...] = ()


@dataclass(frozen=True)
class TextChoice(BaseModel):
    text: str = ""
    index: int = 0
    logprobs: Optional[Logprobs] = None
    finish_reason: Optional[str] = None


@dataclass(frozen=True)
class TextCompletion(BaseModel):
    id: Optional[str] = None
    object: str = "text_completion"
    created: Optional[int] = None
    model: Optional[str] = None
    choices: Tuple[TextChoice, ...] = ()
    usage: Optional[Usage] = None


@dataclass(frozen=True)
class EditChoice(BaseModel):
    text: str = ""
    index: int = 0


@dataclass(frozen=True)
class Edit(BaseModel):
    object: str = "edit"
    created: Optional[int] = None
    choices: Tuple[EditChoice, ...] = ()
    usage: Optional[Usage] = None


@dataclass(frozen=True)
class Embedding(BaseModel):
    """Single embedding result."""

    embedding: Tuple[float, ...] = ()
    index: int = 0


@dataclass(frozen=True)
class EmbeddingResponse(BaseModel):
    """Embeddings response."""

    embeddings: Tuple[Embedding, ...] = ()
    model: Optional[str] = None
    usage: Optional[Usage] = None


@dataclass(frozen=True)
class File(BaseModel):
    """An uploaded file."""

    id: str
    bytes: Optional[int] = None
    created_at: Optional[int] = None
    filename: Optional[str] = None
    purpose: Optional[str] = None
    status: Optional[str] = None
    status_details: Optional[str] = None


@dataclass(frozen=True)
class FineTuneEvent(BaseModel):
    created_at: Optional[int] = None
    level: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class FineTuneHyperparams(BaseModel):
    batch_size: Optional[int] = None
    learning_rate_multiplier: Optional[float] = None
    n_epochs: Optional[int] = None
    prompt_loss_weight: Optional[float] = None


@dataclass(frozen=True)
class FineTune(BaseModel):
    """A fine-tune job and everything the service reports about it."""

    id: str
    model: Optional[str] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None
    status: Optional[str] = None
    fine_tuned_model: Optional[str] = None
    organization_id: Optional[str] = None
    hyperparams: Optional[FineTuneHyperparams] = None
    events: Tuple[FineTuneEvent, ...] = ()
    training_files: Tuple[File, ...] = ()
    validation_files: Tuple[File, ...] = ()
    result_files: Tuple[File, ...] = ()


@dataclass(frozen=True)
class ImageURL(BaseModel):
    url: str


@dataclass(frozen=True)
class ImageJSON(BaseModel):
    b64_json: str


@dataclass(frozen=True)
class ModelPermission(BaseModel):
    id: Optional[str] = None
    created: Optional[int] = None
    allow_create_engine: Optional[bool] = None
    allow_sampling: Optional[bool] = None
    allow_logprobs: Optional[bool] = None
    allow_search_indices: Optional[bool] = None
    allow_view: Optional[bool] = None
    allow_fine_tuning: Optional[bool] = None
    organization: Optional[str] = None
    is_blocking: Optional[bool] = None


@dataclass(frozen=True)
class Model(BaseModel):
    """Model information."""

    id: str
    created: Optional[int] = None
    owned_by: Optional[str] = None
    permission: Tuple[ModelPermission, ...] = ()


@dataclass(frozen=True)
class ModerationResult(BaseModel):
    """Single moderation result."""

    flagged: bool = False
    categories: Dict[str, bool] = field(default_factory=dict)
    category_scores: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ModerationResponse(BaseModel):
    """Moderation response."""

    id: Optional[str] = None
    model: Optional[str] = None
    results: Tuple[ModerationResult, ...] = ()


# =============================================================================
# Response Parsers
# =============================================================================

def parse_usage(data: Optional[Mapping[str, Any]]) -> Optional[Usage]:
    if not data:
        return None
    return Usage(
        prompt_tokens=data.get("prompt_tokens", 0),
        completion_tokens=data.get("completion_tokens", 0),
        total_tokens=data.get("total_tokens", 0),
    )


def parse_message(data: Mapping[str, Any]) -> ChatMessage:
    """Parse a message dict into a ChatMessage object."""
    function_call = None
    if data.get("function_call"):
        fc_data = data["function_call"]
        function_call = FunctionCall(
            name=fc_data.get("name"),
            arguments=fc_data.get("arguments"),
        )
    role = data.get("role", "assistant")
    try:
        role = ChatRole(role)
    except ValueError as e:
        raise TransportError(f"Unsupported chat message role in response: {role!r}", cause=e) from e
    return ChatMessage(
        role=role,
        content=data.get("content"),
        name=data.get("name"),
        function_call=function_call,
    )


def parse_chat_completion(data: Mapping[str, Any]) -> ChatCompletion:
    """Parse a chat completion response dict."""
    choices = []
    for c_data in data.get("choices", []):
        message = c_data.get("message")
        choices.append(ChatChoice(
            index=c_data.get("index", 0),
            message=parse_message(message) if message else None,
            finish_reason=c_data.get("finish_reason"),
        ))

    return ChatCompletion(
        id=data.get("id"),
        object=data.get("object", "chat.completion"),
        created=data.get("created"),
        model=data.get("model"),
        choices=tuple(choices),
        usage=parse_usage(data.get("usage")),
    )


def _parse_logprobs(data: Optional[Mapping[str, Any]]) -> Optional[Logprobs]:
    if not data:
        return None
    return Logprobs(
        tokens=tuple(data.get("tokens") or ()),
        token_logprobs=tuple(data.get("token_logprobs") or ()),
        top_logprobs=tuple(data.get("top_logprobs") or ()),
        text_offset=tuple(data.get("text_offset") or ()),
    )


def parse_text_completion(data: Mapping[str, Any]) -> TextCompletion:
    choices = tuple(
        TextChoice(
            text=c.get("text", ""),
            index=c.get("index", 0),
            logprobs=_parse_logprobs(c.get("logprobs")),
            finish_reason=c.get("finish_reason"),
        )
        for c in data.get("choices", [])
    )
    return TextCompletion(
        id=data.get("id"),
        object=data.get("object", "text_completion"),
        created=data.get("created"),
        model=data.get("model"),
        choices=choices,
        usage=parse_usage(data.get("usage")),
    )


def parse_edit(data: Mapping[str, Any]) -> Edit:
    return Edit(
        object=data.get("object", "edit"),
        created=data.get("created"),
        choices=tuple(EditChoice(text=c.get("text", ""), index=c.get("index", 0)) for c in data.get("choices", [])),
        usage=parse_usage(data.get("usage")),
    )


def parse_embeddings(data: Mapping[str, Any]) -> EmbeddingResponse:
    embeddings = tuple(
        Embedding(embedding=tuple(item.get("embedding", ())), index=item.get("index", 0))
        for item in data.get("data", [])
    )
    return EmbeddingResponse(
        embeddings=embeddings,
        model=data.get("model"),
        usage=parse_usage(data.get("usage")),
    )


def parse_file(data: Mapping[str, Any]) -> File:
    return File(
        id=data["id"],
        bytes=data.get("bytes"),
        created_at=data.get("created_at"),
        filename=data.get("filename"),
        purpose=data.get("purpose"),
        status=data.get("status"),
        status_details=data.get("status_details"),
    )


def parse_fine_tune_event(data: Mapping[str, Any]) -> FineTuneEvent:
    return FineTuneEvent(
        created_at=data.get("created_at"),
        level=data.get("level"),
        message=data.get("message"),
    )


def parse_fine_tune(data: Mapping[str, Any]) -> FineTune:
    hyperparams = data.get("hyperparams")
    return FineTune(
        id=data["id"],
        model=data.get("model"),
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
        status=data.get("status"),
        fine_tuned_model=data.get("fine_tuned_model"),
        organization_id=data.get("organization_id"),
        hyperparams=FineTuneHyperparams(
            batch_size=hyperparams.get("batch_size"),
            learning_rate_multiplier=hyperparams.get("learning_rate_multiplier"),
            n_epochs=hyperparams.get("n_epochs"),
            prompt_loss_weight=hyperparams.get("prompt_loss_weight"),
        ) if hyperparams else None,
        events=tuple(parse_fine_tune_event(e) for e in data.get("events") or ()),
        training_files=tuple(parse_file(f) for f in data.get("training_files") or ()),
        validation_files=tuple(parse_file(f) for f in data.get("validation_files") or ()),
        result_files=tuple(parse_file(f) for f in data.get("result_files") or ()),
    )


def parse_model(data: Mapping[str, Any]) -> Model:
    return Model(
        id=data["id"],
        created=data.get("created"),
        owned_by=data.get("owned_by"),
        permission=tuple(
            ModelPermission(**{f.name: p.get(f.name) for f in fields(ModelPermission)})
            for p in data.get("permission") or ()
        ),
    )


def parse_moderation(data: Mapping[str, Any]) -> ModerationResponse:
    results = tuple(
        ModerationResult(
            flagged=r.get("flagged", False),
            categories=r.get("categories", {}),
            category_scores=r.get("category_scores", {}),
        )
        for r in data.get("results", [])
    )
    return ModerationResponse(id=data.get("id"), model=data.get("model"), results=results)


def parse_image_urls(data: Mapping[str, Any]) -> List[ImageURL]:
    return [ImageURL(url=item["url"]) for item in data.get("data", [])]


def parse_image_json(data: Mapping[str, Any]) -> List[ImageJSON]:
    return [ImageJSON(b64_json=item["b64_json"]) for item in data.get("data", [])]


def parse_page(parse):
    """Wrap ``parse`` so it decodes every item of a ``{"data": [...]}`` page."""
    def parse_items(data: Mapping[str, Any]) -> list:
        return [parse(item) for item in data.get("data", [])]
    return parse_items
