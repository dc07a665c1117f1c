from enum import Enum


class ErrorKind(Enum):
    """
    The kind of the error. The values match the ones used on the binary client api so that both the text and the
    binary protocol can report the same codes
    """

    EMPTY_REQUEST = 0x01
    TOO_SHORT_REQUEST = 0x02
    UNKNOWN_REQUEST = 0x03
    MALFORMED_REQUEST = 0x04

    EMPTY_RESPONSE = 0x10
    TOO_SHORT_RESPONSE = 0x11
    UNKNOWN_RESPONSE = 0x12
    MALFORMED_RESPONSE = 0x13

    CONSTRUCTION_FAILURE = 0x20

    OTHER = 0xFF

    def display_name(self):
        """
        :return: The kind in CamelCase e.g. MalformedRequest
        """
        return "".join(part.capitalize() for part in self.name.split("_"))


class Error(Exception):
    def __init__(self, kind, message):
        """
        The error surfaced to the callers of the credential and the client api code

        :param kind: The ErrorKind, the only part that should be checked by code
        :param message: Human readable context of what failed
        """
        super().__init__(kind, message)
        self.kind = kind
        self.message = message

    def __str__(self):
        return "%s: %s" % (self.kind.display_name(), self.message)


class KeyRecoveryError(Exception):
    """
    Raised when an identity or encryption key can not be recovered from its bytes or base58 string
    """
