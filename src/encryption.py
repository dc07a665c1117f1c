import base58
from nacl.public import PrivateKey as X25519PrivateKey, PublicKey as X25519PublicKey

from error import KeyRecoveryError

KEY_LENGTH = 32


def _from_base58(value):
    try:
        return base58.b58decode(value)
    except ValueError as err:
        raise KeyRecoveryError("Invalid base58 string: %s" % err) from err


class PublicKey:
    def __init__(self, key: X25519PublicKey):
        self.__key = key

    def to_bytes(self):
        return bytes(self.__key)

    @classmethod
    def from_bytes(cls, data):
        if len(data) != KEY_LENGTH:
            raise KeyRecoveryError("Invalid encryption public key length %s" % len(data))
        return cls(X25519PublicKey(bytes(data)))

    def to_base58_string(self):
        return base58.b58encode(self.to_bytes()).decode("ascii")

    @classmethod
    def from_base58_string(cls, value):
        return cls.from_bytes(_from_base58(value))

    def __eq__(self, other):
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()

    def __hash__(self):
        return hash(self.to_bytes())

    def __str__(self):
        return self.to_base58_string()


class PrivateKey:
    def __init__(self, key: X25519PrivateKey):
        self.__key = key

    def public_key(self):
        return PublicKey(self.__key.public_key)

    def to_bytes(self):
        return bytes(self.__key)

    @classmethod
    def from_bytes(cls, data):
        if len(data) != KEY_LENGTH:
            raise KeyRecoveryError("Invalid encryption private key length %s" % len(data))
        return cls(X25519PrivateKey(bytes(data)))

    def to_base58_string(self):
        return base58.b58encode(self.to_bytes()).decode("ascii")

    @classmethod
    def from_base58_string(cls, value):
        return cls.from_bytes(_from_base58(value))


class KeyPair:
    def __init__(self, private_key, public_key):
        self.private_key = private_key
        self.public_key = public_key

    @classmethod
    def new(cls, rng=None):
        """
        Generate a fresh x25519 key pair

        :param rng: Optional source of randomness, a callable n -> n random bytes
        """
        key = X25519PrivateKey(rng(KEY_LENGTH)) if rng is not None else X25519PrivateKey.generate()
        private_key = PrivateKey(key)
        return cls(private_key, private_key.public_key())

    @classmethod
    def from_private_key(cls, private_key):
        return cls(private_key, private_key.public_key())
