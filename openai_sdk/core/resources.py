"""One class per API resource family. Each method is a single round trip."""

from __future__ import annotations

import logging
from typing import List

from .errors import NotFoundError
from .models import (
    ChatCompletion,
    Edit,
    EmbeddingResponse,
    File,
    FineTune,
    FineTuneEvent,
    ImageJSON,
    ImageURL,
    Model,
    ModerationResponse,
    TextCompletion,
    parse_chat_completion,
    parse_edit,
    parse_embeddings,
    parse_file,
    parse_fine_tune,
    parse_fine_tune_event,
    parse_image_json,
    parse_image_urls,
    parse_model,
    parse_moderation,
    parse_page,
    parse_text_completion,
)
from .payloads import (
    ChatCompletionRequest,
    CompletionRequest,
    EditsRequest,
    EmbeddingRequest,
    FileUpload,
    FineTuneRequest,
    ImageCreation,
    ImageEdit,
    ImageVariation,
    ModerationRequest,
)
from .transport import HTTPTransport

logger = logging.getLogger(__name__)


class Resource:
    """Base for resource namespaces."""

    def __init__(self, transport: HTTPTransport):
        self._transport = transport

    def _delete(self, path: str) -> bool:
        """DELETE ``path``; ``False`` when the service reports it missing."""
        try:
            self._transport.request_json("DELETE", path)
        except NotFoundError:
            logger.debug("DELETE %s: not found", path)
            return False
        return True


class Chat(Resource):
    """chat resource namespace."""

    path = "chat/completions"

    def create(self, request: ChatCompletionRequest) -> ChatCompletion:
        """Create a chat completion."""
        return self._transport.execute("POST", self.path, request, parse_chat_completion)


class Completions(Resource):
    """Text completions for a prompt."""

    path = "completions"

    def create(self, request: CompletionRequest) -> TextCompletion:
        return self._transport.execute("POST", self.path, request, parse_text_completion)


class Edits(Resource):
    path = "edits"

    def create(self, request: EditsRequest) -> Edit:
        return self._transport.execute("POST", self.path, request, parse_edit)


class Embeddings(Resource):
    path = "embeddings"

    def create(self, request: EmbeddingRequest) -> EmbeddingResponse:
        return self._transport.execute("POST", self.path, request, parse_embeddings)


class Files(Resource):
    """Uploaded documents, used by fine-tunes."""

    path = "files"

    def upload(self, request: FileUpload) -> File:
        return self._transport.execute_multipart("POST", self.path, request, parse_file)

    def list(self) -> List[File]:
        return self._transport.execute("GET", self.path, decode=parse_page(parse_file))

    def retrieve(self, file_id: str) -> File:
        return self._transport.execute("GET", f"{self.path}/{file_id}", decode=parse_file)

    def delete(self, file_id: str) -> bool:
        """Delete a file. Returns ``False`` if it does not exist."""
        return self._delete(f"{self.path}/{file_id}")

    def download(self, file_id: str) -> bytes:
        """Raw content of a file, passed through untouched."""
        return self._transport.request_bytes("GET", f"{self.path}/{file_id}/content")


class FineTunes(Resource):
    """Fine-tune jobs."""

    path = "fine-tunes"

    def create(self, request: FineTuneRequest) -> FineTune:
        return self._transport.execute("POST", self.path, request, parse_fine_tune)

    def list(self) -> List[FineTune]:
        return self._transport.execute("GET", self.path, decode=parse_page(parse_fine_tune))

    def retrieve(self, fine_tune_id: str) -> FineTune:
        return self._transport.execute("GET", f"{self.path}/{fine_tune_id}", decode=parse_fine_tune)

    def cancel(self, fine_tune_id: str) -> FineTune:
        return self._transport.execute("POST", f"{self.path}/{fine_tune_id}/cancel", decode=parse_fine_tune)

    def events(self, fine_tune_id: str) -> List[FineTuneEvent]:
        return self._transport.execute(
            "GET", f"{self.path}/{fine_tune_id}/events", decode=parse_page(parse_fine_tune_event)
        )

    def delete_model(self, model_id: str) -> bool:
        """Delete a fine-tuned model. Returns ``False`` if it does not exist."""
        return self._delete(f"models/{model_id}")


class Images(Resource):
    """Image generation, edits and variations."""

    def generate(self, creation: ImageCreation) -> List[ImageURL]:
        return self._transport.execute(
            "POST", "images/generations", creation, parse_image_urls, extra={"response_format": "url"}
        )

    def generate_json(self, creation: ImageCreation) -> List[ImageJSON]:
        return self._transport.execute(
            "POST", "images/generations", creation, parse_image_json, extra={"response_format": "b64_json"}
        )

    def edit(self, edit: ImageEdit) -> List[ImageURL]:
        return self._transport.execute_multipart(
            "POST", "images/edits", edit, parse_image_urls, extra={"response_format": "url"}
        )

    def edit_json(self, edit: ImageEdit) -> List[ImageJSON]:
        return self._transport.execute_multipart(
            "POST", "images/edits", edit, parse_image_json, extra={"response_format": "b64_json"}
        )

    def variation(self, variation: ImageVariation) -> List[ImageURL]:
        return self._transport.execute_multipart(
            "POST", "images/variations", variation, parse_image_urls, extra={"response_format": "url"}
        )

    def variation_json(self, variation: ImageVariation) -> List[ImageJSON]:
        return self._transport.execute_multipart(
            "POST", "images/variations", variation, parse_image_json, extra={"response_format": "b64_json"}
        )


class Models(Resource):
    """Models resource."""

    path = "models"

    def list(self) -> List[Model]:
        """List available models."""
        return self._transport.execute("GET", self.path, decode=parse_page(parse_model))

    def retrieve(self, model_id: str) -> Model:
        """Retrieve a specific model."""
        return self._transport.execute("GET", f"{self.path}/{model_id}", decode=parse_model)


class Moderations(Resource):
    """Content moderation resource."""

    path = "moderations"

    def create(self, request: ModerationRequest) -> ModerationResponse:
        return self._transport.execute("POST", self.path, request, parse_moderation)
