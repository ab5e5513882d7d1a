import json

import pytest

from openai_sdk import (
    NOT_GIVEN,
    ChatCompletionFunction,
    ChatCompletionRequest,
    ChatMessage,
    ChatRole,
    CompletionRequest,
    FunctionCall,
    ImageEdit,
)
from openai_sdk.core.payloads import FileSource, split_multipart


def hello_request(**kwargs):
    return ChatCompletionRequest(
        model="gpt-3.5-turbo",
        messages=[ChatMessage(role=ChatRole.USER, content="Hi")],
        **kwargs,
    )


def test_unset_optionals_are_omitted():
    assert hello_request().to_wire() == {
        "model": "gpt-3.5-turbo",
        "messages": [{"role": "user", "content": "Hi"}],
    }


def test_payload_has_no_null_tokens():
    encoded = json.dumps(hello_request(temperature=None, logit_bias=None).to_wire())
    assert "null" not in encoded
    assert "temperature" not in encoded


def test_wire_names():
    request = hello_request(
        temperature=0.5,
        top_p=0.9,
        n=2,
        stop=["\n"],
        max_tokens=16,
        presence_penalty=0.1,
        frequency_penalty=-0.1,
        logit_bias={"50256": -100},
        user="u-1",
    )
    wire = request.to_wire()
    assert wire["top_p"] == 0.9
    assert wire["max_tokens"] == 16
    assert wire["presence_penalty"] == 0.1
    assert wire["frequency_penalty"] == -0.1
    assert wire["logit_bias"] == {"50256": -100}
    assert wire["stop"] == ["\n"]
    assert wire["n"] == 2
    assert wire["user"] == "u-1"


def test_none_normalises_to_not_given():
    assert hello_request(temperature=None).temperature is NOT_GIVEN
    assert hello_request(temperature=None) == hello_request()


def test_sequences_are_frozen():
    messages = [ChatMessage(role="user", content="Hi")]
    request = ChatCompletionRequest(model="m", messages=messages)
    messages.append(ChatMessage(role="user", content="later"))

    assert isinstance(request.messages, tuple)
    assert len(request.messages) == 1


def test_role_accepts_strings():
    assert ChatMessage(role="system", content="x").role is ChatRole.SYSTEM
    with pytest.raises(ValueError):
        ChatMessage(role="robot", content="x")


def test_function_call_message_sends_explicit_null_content():
    message = ChatMessage(
        role=ChatRole.ASSISTANT,
        content=None,
        function_call=FunctionCall(name="get_weather", arguments='{"city": "Paris"}'),
    )
    assert message.to_wire() == {
        "role": "assistant",
        "content": None,
        "function_call": {"name": "get_weather", "arguments": '{"city": "Paris"}'},
    }


def test_absent_content_is_omitted():
    message = ChatMessage(role=ChatRole.ASSISTANT, function_call=FunctionCall(name="f", arguments="{}"))
    assert "content" not in message.to_wire()


@pytest.mark.parametrize(
    "request_model",
    [
        hello_request(),
        hello_request(temperature=1.2, stop=["a", "b"], logit_bias={"1": 5}, n=3),
        hello_request(
            functions=[ChatCompletionFunction(name="f", parameters={"type": "object", "properties": {}})],
            function_call={"name": "f"},
        ),
        ChatCompletionRequest(
            model="gpt-4",
            messages=[
                ChatMessage(role="system", content="be brief"),
                ChatMessage(role="assistant", content=None, function_call=FunctionCall(name="f", arguments="{}")),
                ChatMessage(role="function", name="f", content="42"),
            ],
        ),
        CompletionRequest(model="text-davinci-003", prompt="Say this", echo=True, best_of=2),
    ],
)
def test_decode_of_encode_reproduces_the_model(request_model):
    wire = json.loads(json.dumps(request_model.to_wire()))
    assert type(request_model).from_wire(wire) == request_model


def test_message_order_survives_encoding():
    contents = [f"turn {i}" for i in range(10)]
    request = ChatCompletionRequest(
        model="m", messages=[ChatMessage(role="user", content=c) for c in contents]
    )
    assert [m["content"] for m in request.to_wire()["messages"]] == contents


def test_split_multipart():
    edit = ImageEdit(image=FileSource(name="cat.png", content=b"png"), prompt="add a hat", n=2)
    form, files = split_multipart(edit)

    assert form == {"prompt": "add a hat", "n": "2"}
    assert files == {"image": ("cat.png", b"png")}


def test_file_source_from_path(tmp_path):
    path = tmp_path / "train.jsonl"
    path.write_bytes(b'{"prompt": "a", "completion": "b"}\n')

    source = FileSource.from_path(str(path))

    assert source.name == "train.jsonl"
    assert source.content.startswith(b'{"prompt"')


def test_requests_with_mappings_are_hashable():
    request = hello_request(logit_bias={"50256": -100}, function_call={"name": "f"})
    same = hello_request(logit_bias={"50256": -100}, function_call={"name": "f"})
    function = ChatCompletionFunction(name="f", parameters={"type": "object"})

    assert request == same
    assert hash(request) == hash(same)
    assert len({request, same}) == 1
    assert hash(function) == hash(ChatCompletionFunction(name="f", parameters={"type": "object"}))
