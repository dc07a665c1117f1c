"""
Text (json) equivalents of the requests and responses of the client api, for easier (de)serialization.

Every message is a json object tagged with a camelCase "type" field, e.g.
{"type": "send", "message": "...", "recipient": "...", "withReplySurb": false, "connectionId": 0}
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

from addressing import Recipient, RecipientFormattingError, ReplySurb, ReplySurbError
from error import Error, ErrorKind

logger = logging.getLogger(__name__)

MAX_CONNECTION_ID = 2 ** 64 - 1


@dataclass
class ReconstructedMessage:
    message: bytes
    reply_surb: Optional[ReplySurb] = None


class ClientRequest:
    """
    The requests after the addresses have been decoded
    """

    @dataclass
    class Send:
        message: bytes
        recipient: Recipient
        with_reply_surb: bool
        connection_id: int

    @dataclass
    class SelfAddress:
        pass

    @dataclass
    class Reply:
        message: bytes
        reply_surb: ReplySurb


class ServerResponse:
    @dataclass
    class Received:
        reconstructed: ReconstructedMessage

    @dataclass
    class SelfAddress:
        recipient: Recipient

    @dataclass
    class Error:
        error: Exception


def _decode_object(msg, empty_kind, malformed_kind):
    if not msg:
        raise Error(empty_kind, "the received message is empty")
    try:
        data = json.loads(msg)
    except ValueError as err:
        raise Error(malformed_kind, str(err)) from err
    if not isinstance(data, dict):
        raise Error(malformed_kind, "expected a json object, got %s" % type(data).__name__)
    return data


def _field(data, name, kind, malformed_kind, optional=False):
    value = data.get(name)
    if value is None:
        if optional:
            return None
        raise Error(malformed_kind, "missing field `%s` in `%s`" % (name, data.get("type")))
    # bool is a subclass of int in python
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise Error(malformed_kind, "invalid type of field `%s` in `%s`" % (name, data.get("type")))
    return value


class ClientRequestText:
    @dataclass
    class Send:
        message: str
        recipient: str
        with_reply_surb: bool
        connection_id: int

    @dataclass
    class SelfAddress:
        pass

    @dataclass
    class Reply:
        message: str
        reply_surb: str

    @staticmethod
    def from_json(msg):
        """
        Parse the json message of the client

        :param msg: The message as str
        :return: One of the ClientRequestText variants
        """
        kind = ErrorKind.MALFORMED_REQUEST
        data = _decode_object(msg, ErrorKind.EMPTY_REQUEST, kind)
        request_type = data.get("type")
        if request_type == "send":
            connection_id = _field(data, "connectionId", int, kind)
            if not 0 <= connection_id <= MAX_CONNECTION_ID:
                raise Error(kind, "connectionId %s out of range" % connection_id)
            return ClientRequestText.Send(
                message=_field(data, "message", str, kind),
                recipient=_field(data, "recipient", str, kind),
                with_reply_surb=_field(data, "withReplySurb", bool, kind),
                connection_id=connection_id,
            )
        if request_type == "selfAddress":
            return ClientRequestText.SelfAddress()
        if request_type == "reply":
            return ClientRequestText.Reply(
                message=_field(data, "message", str, kind),
                reply_surb=_field(data, "replySurb", str, kind),
            )
        raise Error(kind, "unknown variant `%s`" % request_type)

    @staticmethod
    def to_json(request):
        if isinstance(request, ClientRequestText.Send):
            data = {
                "type": "send",
                "message": request.message,
                "recipient": request.recipient,
                "withReplySurb": request.with_reply_surb,
                "connectionId": request.connection_id,
            }
        elif isinstance(request, ClientRequestText.SelfAddress):
            data = {"type": "selfAddress"}
        elif isinstance(request, ClientRequestText.Reply):
            data = {"type": "reply", "message": request.message, "replySurb": request.reply_surb}
        else:
            raise TypeError("not a ClientRequestText: %r" % (request,))
        return json.dumps(data)

    @staticmethod
    def into_client_request(request):
        """
        Decode the recipient and the reply surb of the text request

        :return: One of the ClientRequest variants
        """
        if isinstance(request, ClientRequestText.Send):
            try:
                recipient = Recipient.try_from_base58_string(request.recipient)
            except RecipientFormattingError as err:
                logger.debug("Failed to decode the recipient of a send request: %s", err)
                raise Error(ErrorKind.MALFORMED_REQUEST, str(err)) from err
            return ClientRequest.Send(
                message=request.message.encode("utf-8"),
                recipient=recipient,
                with_reply_surb=request.with_reply_surb,
                connection_id=request.connection_id,
            )
        if isinstance(request, ClientRequestText.SelfAddress):
            return ClientRequest.SelfAddress()
        if isinstance(request, ClientRequestText.Reply):
            try:
                reply_surb = ReplySurb.from_base58_string(request.reply_surb)
            except ReplySurbError as err:
                logger.debug("Failed to decode the reply surb of a reply request: %s", err)
                raise Error(ErrorKind.MALFORMED_REQUEST, str(err)) from err
            return ClientRequest.Reply(message=request.message.encode("utf-8"), reply_surb=reply_surb)
        raise TypeError("not a ClientRequestText: %r" % (request,))


class ServerResponseText:
    @dataclass
    class Received:
        message: str
        reply_surb: Optional[str] = None

    @dataclass
    class SelfAddress:
        address: str

    @dataclass
    class Error:
        message: str

    @staticmethod
    def from_server_response(response):
        """
        :param response: One of the ServerResponse variants
        :return: The equivalent ServerResponseText variant
        """
        if isinstance(response, ServerResponse.Received):
            reconstructed = response.reconstructed
            reply_surb = reconstructed.reply_surb
            return ServerResponseText.Received(
                # Not every message is valid utf-8, the invalid bytes get replaced
                message=reconstructed.message.decode("utf-8", errors="replace"),
                reply_surb=reply_surb.to_base58_string() if reply_surb is not None else None,
            )
        if isinstance(response, ServerResponse.SelfAddress):
            return ServerResponseText.SelfAddress(address=str(response.recipient))
        if isinstance(response, ServerResponse.Error):
            return ServerResponseText.Error(message=str(response.error))
        raise TypeError("not a ServerResponse: %r" % (response,))

    @staticmethod
    def to_json(response):
        if isinstance(response, ServerResponseText.Received):
            data = {"type": "received", "message": response.message, "replySurb": response.reply_surb}
        elif isinstance(response, ServerResponseText.SelfAddress):
            data = {"type": "selfAddress", "address": response.address}
        elif isinstance(response, ServerResponseText.Error):
            data = {"type": "error", "message": response.message}
        else:
            raise TypeError("not a ServerResponseText: %r" % (response,))
        return json.dumps(data)

    @staticmethod
    def from_json(msg):
        kind = ErrorKind.MALFORMED_RESPONSE
        data = _decode_object(msg, ErrorKind.EMPTY_RESPONSE, kind)
        response_type = data.get("type")
        if response_type == "received":
            return ServerResponseText.Received(
                message=_field(data, "message", str, kind),
                reply_surb=_field(data, "replySurb", str, kind, optional=True),
            )
        if response_type == "selfAddress":
            return ServerResponseText.SelfAddress(address=_field(data, "address", str, kind))
        if response_type == "error":
            return ServerResponseText.Error(message=_field(data, "message", str, kind))
        raise Error(kind, "unknown variant `%s`" % response_type)
