import json

import pytest

import encryption
import identity
from addressing import Recipient, ReplySurb
from error import Error, ErrorKind
from text import ClientRequest, ClientRequestText, ReconstructedMessage, ServerResponse, ServerResponseText


@pytest.fixture
def recipient():
    return Recipient(identity.KeyPair.new().public_key, encryption.KeyPair.new().public_key,
                     identity.KeyPair.new().public_key)


def test_send_request(recipient):
    msg = json.dumps({
        "type": "send",
        "message": "hello",
        "recipient": str(recipient),
        "withReplySurb": True,
        "connectionId": 42,
    })
    request = ClientRequestText.from_json(msg)
    assert request == ClientRequestText.Send("hello", str(recipient), True, 42)
    decoded = ClientRequestText.into_client_request(request)
    assert decoded == ClientRequest.Send(b"hello", recipient, True, 42)
    assert ClientRequestText.from_json(ClientRequestText.to_json(request)) == request


def test_self_address_and_reply_requests():
    assert ClientRequestText.from_json('{"type": "selfAddress"}') == ClientRequestText.SelfAddress()
    assert ClientRequestText.into_client_request(ClientRequestText.SelfAddress()) == ClientRequest.SelfAddress()

    surb = ReplySurb(b"\x01\x02\x03 surb")
    request = ClientRequestText.from_json(json.dumps({
        "type": "reply",
        "message": "hi back",
        "replySurb": surb.to_base58_string(),
    }))
    assert ClientRequestText.into_client_request(request) == ClientRequest.Reply(b"hi back", surb)


@pytest.mark.parametrize("msg", [
    "not json",
    "[1, 2]",
    '{"type": "unknown"}',
    '{"message": "no type"}',
    '{"type": "send", "message": "hello", "withReplySurb": false, "connectionId": 1}',
    '{"type": "send", "message": "hello", "recipient": "a", "withReplySurb": 1, "connectionId": 1}',
    '{"type": "send", "message": "hello", "recipient": "a", "withReplySurb": false, "connectionId": -1}',
    '{"type": "send", "message": "hello", "recipient": "a", "withReplySurb": false, "connectionId": true}',
    '{"type": "reply", "message": "hello"}',
])
def test_malformed_requests(msg):
    with pytest.raises(Error) as err:
        ClientRequestText.from_json(msg)
    assert err.value.kind == ErrorKind.MALFORMED_REQUEST


def test_empty_request():
    with pytest.raises(Error) as err:
        ClientRequestText.from_json("")
    assert err.value.kind == ErrorKind.EMPTY_REQUEST


@pytest.mark.parametrize("bad_recipient", [
    "no-gateway",
    "missingencryption@gateway",
    "0OIl.abc@def",
])
def test_invalid_recipient(bad_recipient):
    request = ClientRequestText.Send("hello", bad_recipient, False, 0)
    with pytest.raises(Error) as err:
        ClientRequestText.into_client_request(request)
    assert err.value.kind == ErrorKind.MALFORMED_REQUEST
    assert str(err.value).startswith("MalformedRequest: ")


def test_invalid_reply_surb():
    for reply_surb in ["", "0OIl"]:
        with pytest.raises(Error) as err:
            ClientRequestText.into_client_request(ClientRequestText.Reply("hello", reply_surb))
        assert err.value.kind == ErrorKind.MALFORMED_REQUEST


def test_recipient_round_trip(recipient):
    assert Recipient.try_from_base58_string(str(recipient)) == recipient


def test_server_responses(recipient):
    surb = ReplySurb(b"surb")
    received = ServerResponseText.from_server_response(
        ServerResponse.Received(ReconstructedMessage(b"hello \xff", surb)))
    assert received.message == "hello �"
    assert received.reply_surb == surb.to_base58_string()
    assert ServerResponseText.from_json(ServerResponseText.to_json(received)) == received

    no_surb = ServerResponseText.from_server_response(ServerResponse.Received(ReconstructedMessage(b"hello")))
    assert json.loads(ServerResponseText.to_json(no_surb)) == {"type": "received", "message": "hello",
                                                              "replySurb": None}

    address = ServerResponseText.from_server_response(ServerResponse.SelfAddress(recipient))
    assert json.loads(ServerResponseText.to_json(address)) == {"type": "selfAddress", "address": str(recipient)}

    error = ServerResponseText.from_server_response(
        ServerResponse.Error(Error(ErrorKind.MALFORMED_REQUEST, "bad recipient")))
    assert error == ServerResponseText.Error("MalformedRequest: bad recipient")


def test_malformed_response():
    with pytest.raises(Error) as err:
        ServerResponseText.from_json('{"type": "selfAddress"}')
    assert err.value.kind == ErrorKind.MALFORMED_RESPONSE
    with pytest.raises(Error) as err:
        ServerResponseText.from_json("")
    assert err.value.kind == ErrorKind.EMPTY_RESPONSE
