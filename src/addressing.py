import base58

import encryption
import identity
from error import KeyRecoveryError

CLIENT_ENCRYPTION_KEY_SEPARATOR = "."
GATEWAY_SEPARATOR = "@"


class RecipientFormattingError(Exception):
    pass


class ReplySurbError(Exception):
    pass


class Recipient:
    def __init__(self, client_identity, client_encryption_key, gateway):
        """
        The address of a client in the mixnet, <client identity>.<client encryption key>@<gateway identity>

        :param client_identity: identity.PublicKey of the client
        :param client_encryption_key: encryption.PublicKey of the client
        :param gateway: identity.PublicKey of the gateway the client is registered at
        """
        self.client_identity = client_identity
        self.client_encryption_key = client_encryption_key
        self.gateway = gateway

    @classmethod
    def try_from_base58_string(cls, value):
        client_part, separator, gateway_part = value.partition(GATEWAY_SEPARATOR)
        if not separator:
            raise RecipientFormattingError("malformed recipient %r, the gateway part is missing" % value)
        identity_part, separator, encryption_part = client_part.partition(CLIENT_ENCRYPTION_KEY_SEPARATOR)
        if not separator:
            raise RecipientFormattingError("malformed recipient %r, the client encryption key is missing" % value)
        try:
            client_identity = identity.PublicKey.from_base58_string(identity_part)
            client_encryption_key = encryption.PublicKey.from_base58_string(encryption_part)
            gateway = identity.PublicKey.from_base58_string(gateway_part)
        except KeyRecoveryError as err:
            raise RecipientFormattingError("malformed recipient %r: %s" % (value, err)) from err
        return cls(client_identity, client_encryption_key, gateway)

    def __str__(self):
        return "%s%s%s%s%s" % (self.client_identity, CLIENT_ENCRYPTION_KEY_SEPARATOR, self.client_encryption_key,
                               GATEWAY_SEPARATOR, self.gateway)

    def __eq__(self, other):
        if not isinstance(other, Recipient):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self):
        return hash(str(self))


class ReplySurb:
    def __init__(self, data):
        """
        Single use reply block, opaque to the client api

        :param data: The serialized surb
        """
        if not data:
            raise ReplySurbError("empty reply surb")
        self.data = bytes(data)

    @classmethod
    def from_base58_string(cls, value):
        try:
            data = base58.b58decode(value)
        except ValueError as err:
            raise ReplySurbError("malformed reply surb: %s" % err) from err
        return cls(data)

    def to_base58_string(self):
        return base58.b58encode(self.data).decode("ascii")

    def __eq__(self, other):
        if not isinstance(other, ReplySurb):
            return NotImplemented
        return self.data == other.data

    def __hash__(self):
        return hash(self.data)
