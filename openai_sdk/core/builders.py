"""
Mutable builders for request models.

A builder holds the same fields as its request, all optional. Setters return
the builder so calls chain, passing ``None`` clears a field, and the last
write wins. ``build()`` only checks that required fields are present; value
ranges are left to the service.

Usage:
    request = (
        ChatCompletionRequest.new_builder()
        .model("gpt-3.5-turbo")
        .messages(lambda m: m.system("You are terse.").user("Hi"))
        .temperature(0.2)
        .build()
    )
"""

from __future__ import annotations

from dataclasses import MISSING, fields
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Union

from .errors import MissingFieldError
from .payloads import (
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


def _snapshot(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(value)
    if isinstance(value, Mapping):
        return dict(value)
    return value


class RequestBuilder:
    """Collects field values and turns them into ``request_class`` on ``build()``."""

    request_class: type = None

    def __init__(self):
        self._values: Dict[str, Any] = {}

    def _set(self, name: str, value: Any):
        if value is None:
            self._values.pop(name, None)
        else:
            self._values[name] = _snapshot(value)
        return self

    def _get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def build(self):
        for f in fields(self.request_class):
            if f.default is MISSING and f.default_factory is MISSING and f.name not in self._values:
                raise MissingFieldError(f.name)
        return self.request_class(**self._values)

    def __repr__(self):
        values = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"{self.__class__.__name__}({values})"


# =============================================================================
# Chat
# =============================================================================

class ChatMessageBuilder(RequestBuilder):
    """Builds a single ``ChatMessage``."""

    request_class = ChatMessage

    def role(self, role: Union[ChatRole, str, None]):
        return self._set("role", ChatRole(role) if role is not None else None)

    def content(self, content: Optional[str] = NOT_GIVEN):
        """Set the text. ``content(None)`` sends an explicit ``null``; ``content()`` clears it."""
        if content is NOT_GIVEN:
            self._values.pop("content", None)
        else:
            self._values["content"] = content
        return self

    def name(self, name: Optional[str]):
        return self._set("name", name)

    def function_call(self, function_call: Union[FunctionCall, Mapping[str, str], None]):
        if isinstance(function_call, Mapping):
            function_call = FunctionCall(**function_call)
        return self._set("function_call", function_call)


class ChatMessagesBuilder:
    """Accumulates messages in call order."""

    def __init__(self):
        self._messages = []

    @property
    def messages(self) -> Sequence[ChatMessage]:
        return tuple(self._messages)

    def add(self, message: ChatMessage) -> "ChatMessagesBuilder":
        self._messages.append(message)
        return self

    def message(self, configure: Callable[[ChatMessageBuilder], Any]) -> "ChatMessagesBuilder":
        """Configure a fresh ``ChatMessageBuilder`` and append what it builds."""
        builder = ChatMessageBuilder()
        configure(builder)
        return self.add(builder.build())

    def add_message(
        self,
        role: Union[ChatRole, str] = None,
        content: Optional[str] = NOT_GIVEN,
        name: str = None,
        function_call: Union[FunctionCall, Mapping[str, str]] = None,
    ) -> "ChatMessagesBuilder":
        builder = ChatMessageBuilder().role(role).content(content).name(name).function_call(function_call)
        return self.add(builder.build())

    def system(self, content: str, **kwargs) -> "ChatMessagesBuilder":
        return self.add_message(ChatRole.SYSTEM, content, **kwargs)

    def user(self, content: str, **kwargs) -> "ChatMessagesBuilder":
        return self.add_message(ChatRole.USER, content, **kwargs)

    def assistant(self, content: Optional[str] = NOT_GIVEN, **kwargs) -> "ChatMessagesBuilder":
        return self.add_message(ChatRole.ASSISTANT, content, **kwargs)

    def function(self, name: str, content: str) -> "ChatMessagesBuilder":
        """Append the result of a function call."""
        return self.add_message(ChatRole.FUNCTION, content, name=name)

    def __len__(self):
        return len(self._messages)


class ChatCompletionRequestBuilder(RequestBuilder):
    request_class = ChatCompletionRequest

    def model(self, model: Optional[str]):
        """ID of the model to use, e.g. ``gpt-3.5-turbo``."""
        return self._set("model", model)

    def messages(
        self,
        messages: Union[ChatMessagesBuilder, Iterable[ChatMessage], Callable[[ChatMessagesBuilder], Any], None],
    ):
        """Set the conversation.

        Accepts a ``ChatMessagesBuilder``, an iterable of ``ChatMessage``, or a
        callable that fills in a fresh ``ChatMessagesBuilder``.
        """
        if messages is None:
            return self._set("messages", None)
        if isinstance(messages, ChatMessagesBuilder):
            return self._set("messages", messages.messages)
        if callable(messages):
            builder = ChatMessagesBuilder()
            messages(builder)
            return self._set("messages", builder.messages)
        return self._set("messages", tuple(messages))

    def temperature(self, temperature: Optional[float]):
        """Sampling temperature between 0 and 2. Prefer changing this or ``top_p``, not both."""
        return self._set("temperature", temperature)

    def top_p(self, top_p: Optional[float]):
        """Nucleus sampling probability mass between 0 and 1."""
        return self._set("top_p", top_p)

    def n(self, n: Optional[int]):
        """How many choices to generate, at least 1."""
        return self._set("n", n)

    def stop(self, stop: Optional[Sequence[str]]):
        """Up to 4 sequences where generation stops."""
        return self._set("stop", stop)

    def max_tokens(self, max_tokens: Optional[int]):
        """Upper bound on generated tokens, 0 or more."""
        return self._set("max_tokens", max_tokens)

    def presence_penalty(self, presence_penalty: Optional[float]):
        """Between -2.0 and 2.0; positive values favour new topics."""
        return self._set("presence_penalty", presence_penalty)

    def frequency_penalty(self, frequency_penalty: Optional[float]):
        """Between -2.0 and 2.0; positive values discourage verbatim repetition."""
        return self._set("frequency_penalty", frequency_penalty)

    def logit_bias(self, logit_bias: Optional[Mapping[str, int]]):
        """Token id (as a string) to a bias between -100 and 100."""
        return self._set("logit_bias", logit_bias)

    def user(self, user: Optional[str]):
        return self._set("user", user)

    def functions(self, functions: Optional[Iterable[ChatCompletionFunction]]):
        return self._set("functions", tuple(functions) if functions is not None else None)

    def add_function(self, name: str, description: str = None, parameters: Mapping[str, Any] = None):
        """Append one function definition."""
        function = ChatCompletionFunction(name=name, description=description, parameters=parameters)
        return self._set("functions", tuple(self._get("functions", ())) + (function,))

    def function_call(self, function_call: Union[str, Mapping[str, str], None]):
        """``"auto"``, ``"none"`` or ``{"name": <function>}``."""
        return self._set("function_call", function_call)


# =============================================================================
# Other request builders
# =============================================================================

class CompletionRequestBuilder(RequestBuilder):
    request_class = CompletionRequest

    def model(self, model):
        return self._set("model", model)

    def prompt(self, prompt):
        return self._set("prompt", prompt)

    def suffix(self, suffix):
        return self._set("suffix", suffix)

    def max_tokens(self, max_tokens):
        return self._set("max_tokens", max_tokens)

    def temperature(self, temperature):
        return self._set("temperature", temperature)

    def top_p(self, top_p):
        return self._set("top_p", top_p)

    def n(self, n):
        return self._set("n", n)

    def logprobs(self, logprobs):
        """Include log probabilities of the most likely tokens, at most 5."""
        return self._set("logprobs", logprobs)

    def echo(self, echo):
        return self._set("echo", echo)

    def stop(self, stop):
        return self._set("stop", stop)

    def presence_penalty(self, presence_penalty):
        return self._set("presence_penalty", presence_penalty)

    def frequency_penalty(self, frequency_penalty):
        return self._set("frequency_penalty", frequency_penalty)

    def best_of(self, best_of):
        """Server-side candidates; must be greater than ``n`` when both are set."""
        return self._set("best_of", best_of)

    def logit_bias(self, logit_bias):
        return self._set("logit_bias", logit_bias)

    def user(self, user):
        return self._set("user", user)


class EditsRequestBuilder(RequestBuilder):
    request_class = EditsRequest

    def model(self, model):
        return self._set("model", model)

    def instruction(self, instruction):
        return self._set("instruction", instruction)

    def input(self, input):
        return self._set("input", input)

    def temperature(self, temperature):
        return self._set("temperature", temperature)

    def top_p(self, top_p):
        return self._set("top_p", top_p)

    def n(self, n):
        return self._set("n", n)


class EmbeddingRequestBuilder(RequestBuilder):
    request_class = EmbeddingRequest

    def model(self, model):
        return self._set("model", model)

    def input(self, input: Union[str, Iterable[str], None]):
        if isinstance(input, str):
            input = [input]
        return self._set("input", tuple(input) if input is not None else None)

    def user(self, user):
        return self._set("user", user)


class ModerationRequestBuilder(RequestBuilder):
    request_class = ModerationRequest

    def input(self, input: Union[str, Iterable[str], None]):
        if isinstance(input, str):
            input = [input]
        return self._set("input", tuple(input) if input is not None else None)

    def model(self, model):
        """``text-moderation-stable`` or ``text-moderation-latest``."""
        return self._set("model", model)


class FineTuneRequestBuilder(RequestBuilder):
    request_class = FineTuneRequest

    def training_file(self, training_file):
        return self._set("training_file", training_file)

    def validation_file(self, validation_file):
        return self._set("validation_file", validation_file)

    def model(self, model):
        return self._set("model", model)

    def n_epochs(self, n_epochs):
        return self._set("n_epochs", n_epochs)

    def batch_size(self, batch_size):
        return self._set("batch_size", batch_size)

    def learning_rate_multiplier(self, learning_rate_multiplier):
        return self._set("learning_rate_multiplier", learning_rate_multiplier)

    def prompt_loss_weight(self, prompt_loss_weight):
        return self._set("prompt_loss_weight", prompt_loss_weight)

    def compute_classification_metrics(self, compute_classification_metrics):
        return self._set("compute_classification_metrics", compute_classification_metrics)

    def classification_n_classes(self, classification_n_classes):
        return self._set("classification_n_classes", classification_n_classes)

    def classification_positive_class(self, classification_positive_class):
        return self._set("classification_positive_class", classification_positive_class)

    def classification_betas(self, classification_betas):
        return self._set("classification_betas", classification_betas)

    def suffix(self, suffix):
        """Up to 40 characters appended to the fine-tuned model name."""
        return self._set("suffix", suffix)


class FileUploadBuilder(RequestBuilder):
    request_class = FileUpload

    def file(self, file: Union[FileSource, str, None]):
        """A ``FileSource`` or a path to read."""
        if isinstance(file, str):
            file = FileSource.from_path(file)
        return self._set("file", file)

    def purpose(self, purpose):
        return self._set("purpose", purpose)


class ImageCreationBuilder(RequestBuilder):
    request_class = ImageCreation

    def prompt(self, prompt):
        return self._set("prompt", prompt)

    def n(self, n):
        return self._set("n", n)

    def size(self, size):
        return self._set("size", size)

    def user(self, user):
        return self._set("user", user)


class ImageEditBuilder(RequestBuilder):
    request_class = ImageEdit

    def image(self, image: Union[FileSource, str, None]):
        if isinstance(image, str):
            image = FileSource.from_path(image)
        return self._set("image", image)

    def mask(self, mask: Union[FileSource, str, None]):
        if isinstance(mask, str):
            mask = FileSource.from_path(mask)
        return self._set("mask", mask)

    def prompt(self, prompt):
        return self._set("prompt", prompt)

    def n(self, n):
        return self._set("n", n)

    def size(self, size):
        return self._set("size", size)

    def user(self, user):
        return self._set("user", user)


class ImageVariationBuilder(RequestBuilder):
    request_class = ImageVariation

    def image(self, image: Union[FileSource, str, None]):
        if isinstance(image, str):
            image = FileSource.from_path(image)
        return self._set("image", image)

    def n(self, n):
        return self._set("n", n)

    def size(self, size):
        return self._set("size", size)

    def user(self, user):
        return self._set("user", user)


BUILDERS = {
    builder.request_class: builder
    for builder in (
        ChatMessageBuilder,
        ChatCompletionRequestBuilder,
        CompletionRequestBuilder,
        EditsRequestBuilder,
        EmbeddingRequestBuilder,
        ModerationRequestBuilder,
        FineTuneRequestBuilder,
        FileUploadBuilder,
        ImageCreationBuilder,
        ImageEditBuilder,
        ImageVariationBuilder,
    )
}


def builder_for(request_class: type) -> type:
    """The builder class producing ``request_class``."""
    try:
        return BUILDERS[request_class]
    except KeyError:
        raise TypeError(f"No builder registered for {request_class.__name__}") from None


def chat_completion_request(configure: Callable[[ChatCompletionRequestBuilder], Any]) -> ChatCompletionRequest:
    """Configure a fresh builder with ``configure`` and build it."""
    builder = ChatCompletionRequestBuilder()
    configure(builder)
    return builder.build()
