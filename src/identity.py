import base58
from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import SigningKey, VerifyKey

from error import KeyRecoveryError

PUBLIC_KEY_LENGTH = 32
SECRET_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64


def _from_base58(value):
    try:
        return base58.b58decode(value)
    except ValueError as err:
        raise KeyRecoveryError("Invalid base58 string: %s" % err) from err


class PublicKey:
    def __init__(self, verify_key: VerifyKey):
        self.__verify_key = verify_key

    def verify(self, message, signature):
        """
        :return: True if the signature was created over the message by the private key of this public key
        """
        try:
            self.__verify_key.verify(message, signature.to_bytes())
        except BadSignatureError:
            return False
        return True

    def to_bytes(self):
        return bytes(self.__verify_key)

    @classmethod
    def from_bytes(cls, data):
        if len(data) != PUBLIC_KEY_LENGTH:
            raise KeyRecoveryError("Invalid identity public key length %s" % len(data))
        try:
            return cls(VerifyKey(bytes(data)))
        except (CryptoError, ValueError) as err:
            raise KeyRecoveryError(str(err)) from err

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
    def __init__(self, signing_key: SigningKey):
        self.__signing_key = signing_key

    def public_key(self):
        return PublicKey(self.__signing_key.verify_key)

    def sign(self, message):
        """
        Ed25519 signature over the message
        """
        return Signature(self.__signing_key.sign(bytes(message)).signature)

    def to_bytes(self):
        return bytes(self.__signing_key)

    @classmethod
    def from_bytes(cls, data):
        if len(data) != SECRET_KEY_LENGTH:
            raise KeyRecoveryError("Invalid identity private key length %s" % len(data))
        return cls(SigningKey(bytes(data)))

    def to_base58_string(self):
        return base58.b58encode(self.to_bytes()).decode("ascii")

    @classmethod
    def from_base58_string(cls, value):
        return cls.from_bytes(_from_base58(value))


class Signature:
    def __init__(self, data):
        if len(data) != SIGNATURE_LENGTH:
            raise KeyRecoveryError("Invalid signature length %s" % len(data))
        self.__data = bytes(data)

    def to_bytes(self):
        return self.__data

    @classmethod
    def from_bytes(cls, data):
        return cls(data)

    def to_base58_string(self):
        return base58.b58encode(self.__data).decode("ascii")

    @classmethod
    def from_base58_string(cls, value):
        return cls(_from_base58(value))

    def __eq__(self, other):
        if not isinstance(other, Signature):
            return NotImplemented
        return self.__data == other.__data

    def __hash__(self):
        return hash(self.__data)


class KeyPair:
    def __init__(self, private_key, public_key):
        self.private_key = private_key
        self.public_key = public_key

    @classmethod
    def new(cls, rng=None):
        """
        Generate a fresh identity key pair

        :param rng: Optional source of randomness, a callable n -> n random bytes
        """
        signing_key = SigningKey(rng(SECRET_KEY_LENGTH)) if rng is not None else SigningKey.generate()
        private_key = PrivateKey(signing_key)
        return cls(private_key, private_key.public_key())

    @classmethod
    def from_private_key(cls, private_key):
        return cls(private_key, private_key.public_key())
