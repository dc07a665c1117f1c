# For time being assume the bandwidth credential consists of the public identity of the requester and the bandwidth
# value. There is no double spending protection yet, the serial number is only carried to the credential.

import logging

from credential import prepare_credential_for_spending
from error import Error, ErrorKind
from client import prepare_blind_sign
from helper import CoconutError, Parameters, hash_to_scalar

logger = logging.getLogger(__name__)

PUBLIC_ATTRIBUTES = 2
PRIVATE_ATTRIBUTES = 2
TOTAL_ATTRIBUTES = PUBLIC_ATTRIBUTES + PRIVATE_ATTRIBUTES

# 10GB, must match the value the gateways expect
BANDWIDTH_VALUE = 10 * 1024 * 1024 * 1024
BANDWIDTH_VALUE_BYTES = 8

TX_HASH_LENGTH = 32


def bandwidth_value_bytes():
    return BANDWIDTH_VALUE.to_bytes(BANDWIDTH_VALUE_BYTES, "big")


def _check_tx_hash(tx_hash):
    if not isinstance(tx_hash, (bytes, bytearray, memoryview)):
        raise Error(ErrorKind.MALFORMED_REQUEST, "transaction hash must be bytes, got %s" % type(tx_hash).__name__)
    tx_hash = bytes(tx_hash)
    if len(tx_hash) != TX_HASH_LENGTH:
        raise Error(ErrorKind.MALFORMED_REQUEST,
                    "transaction hash must be %s bytes, got %s" % (TX_HASH_LENGTH, len(tx_hash)))
    return tx_hash


class BandwidthVoucher:
    def __init__(self, serial_number, binding_number, voucher_value_plain, voucher_info_plain, tx_hash, signing_key,
                 encryption_key, pedersen_commitments_openings, blind_sign_request, use_request):
        """
        Use BandwidthVoucher.new or BandwidthVoucher.new_with_blind_sign_req instead

        :param serial_number: A random secret value generated by the client used for double-spending detection
        :param binding_number: A random secret value generated by the client used to bind multiple credentials together
        :param voucher_value_plain: The plain text value (e.g., bandwidth) encoded in this voucher
        :param voucher_info_plain: A field with public information, e.g., type of voucher, interval etc.
        :param tx_hash: The hash of the deposit transaction
        :param signing_key: Identity private key ensuring the depositor requested these attributes
        :param encryption_key: Encryption private key ensuring only this client receives the signature share
        :param pedersen_commitments_openings: The openings of the commitments of the private attributes
        :param blind_sign_request: The request for the issuers
        :param use_request: True if the request was created together with this voucher
        """
        tx_hash = _check_tx_hash(tx_hash)
        self.__serial_number = serial_number
        self.__binding_number = binding_number
        self.__voucher_value_plain = voucher_value_plain
        self.__voucher_value = hash_to_scalar(voucher_value_plain)
        self.__voucher_info_plain = voucher_info_plain
        self.__voucher_info = hash_to_scalar(voucher_info_plain)
        self.__tx_hash = tx_hash
        self.__signing_key = signing_key
        self.__encryption_key = encryption_key
        self.__pedersen_commitments_openings = tuple(pedersen_commitments_openings)
        self.__blind_sign_request = blind_sign_request
        self.__use_request = use_request

    @classmethod
    def new(cls, params, voucher_value, voucher_info, tx_hash, signing_key, encryption_key, rng=None):
        """
        Create a voucher for a deposit with fresh private attributes and its blind sign request

        :param params: The parameters of the scheme, at least TOTAL_ATTRIBUTES
        :param voucher_value: The plain text value of the voucher
        :param voucher_info: The plain text information of the voucher
        :param rng: Optional source of randomness, overrides the one of the params
        :return: The voucher
        """
        tx_hash = _check_tx_hash(tx_hash)
        serial_number = params.random_scalar(rng)
        binding_number = params.random_scalar(rng)
        public_attributes = [hash_to_scalar(voucher_value), hash_to_scalar(voucher_info)]
        try:
            pedersen_commitments_openings, blind_sign_request = prepare_blind_sign(
                params, [serial_number, binding_number], public_attributes, rng)
        except CoconutError as err:
            raise Error(ErrorKind.CONSTRUCTION_FAILURE, "could not prepare the blind sign request: %s" % err) from err
        logger.debug("Created bandwidth voucher for transaction %s", tx_hash.hex())
        return cls(serial_number, binding_number, voucher_value, voucher_info, tx_hash, signing_key, encryption_key,
                   pedersen_commitments_openings, blind_sign_request, True)

    @classmethod
    def new_with_blind_sign_req(cls, private_attributes, public_attributes_plain, tx_hash, signing_key,
                                encryption_key, pedersen_commitments_openings, blind_sign_request):
        """
        Assemble a voucher out of a request that was prepared before, e.g. stored and loaded again. Nothing random is
        generated and the request is not marked as created here.

        :param private_attributes: [serial_number, binding_number]
        :param public_attributes_plain: [voucher_value, voucher_info]
        :return: The voucher
        """
        if len(private_attributes) != PRIVATE_ATTRIBUTES:
            raise Error(ErrorKind.MALFORMED_REQUEST,
                        "expected %s private attributes, got %s" % (PRIVATE_ATTRIBUTES, len(private_attributes)))
        if len(public_attributes_plain) != PUBLIC_ATTRIBUTES:
            raise Error(ErrorKind.MALFORMED_REQUEST,
                        "expected %s public attributes, got %s" % (PUBLIC_ATTRIBUTES, len(public_attributes_plain)))
        serial_number, binding_number = private_attributes
        voucher_value, voucher_info = public_attributes_plain
        return cls(serial_number, binding_number, voucher_value, voucher_info, tx_hash, signing_key, encryption_key,
                   pedersen_commitments_openings, blind_sign_request, False)

    @staticmethod
    def verify_against_plain(values, plain_values):
        """
        Check if the plain values correspond to the public attributes

        :param values: The public attributes [value, info]
        :param plain_values: The plain texts [value, info]
        :return: True only if both have exactly two elements and they match in order
        """
        return len(values) == PUBLIC_ATTRIBUTES \
            and len(plain_values) == PUBLIC_ATTRIBUTES \
            and all(isinstance(plain, (str, bytes)) for plain in plain_values) \
            and values[0] == hash_to_scalar(plain_values[0]) \
            and values[1] == hash_to_scalar(plain_values[1])

    @property
    def tx_hash(self):
        return self.__tx_hash

    @property
    def encryption_key(self):
        return self.__encryption_key

    @property
    def pedersen_commitments_openings(self):
        return self.__pedersen_commitments_openings

    @property
    def blind_sign_request(self):
        return self.__blind_sign_request

    @property
    def use_request(self):
        return self.__use_request

    def get_public_attributes(self):
        return [self.__voucher_value, self.__voucher_info]

    def get_public_attributes_plain(self):
        return [self.__voucher_value_plain, self.__voucher_info_plain]

    def get_private_attributes(self):
        return [self.__serial_number, self.__binding_number]

    def sign(self, request):
        """
        Sign the request together with the hash of the deposit so the issuers know the depositor asked for it

        :param request: The blind sign request
        :return: The identity signature over request || tx_hash
        """
        message = request.to_bytes() + self.__tx_hash
        return self.__signing_key.sign(message)


def verify_request_signature(public_key, request, tx_hash, signature):
    """
    The check the issuers do with the identity key associated with the deposit

    :return: True if the signature was created over request || tx_hash with the private key of public_key
    """
    return public_key.verify(request.to_bytes() + bytes(tx_hash), signature)


def spend_public_attributes(raw_identity):
    """
    :param raw_identity: The public identity of the spender
    :return: The raw public attributes revealed when spending, [identity, bandwidth value]
    """
    return [bytes(raw_identity), bandwidth_value_bytes()]


def prepare_for_spending(raw_identity, signature, voucher, verification_key, rng=None):
    """
    Create the credential to spend at a gateway

    :param raw_identity: The public identity bytes of the spender
    :param signature: The (aggregated and unblinded) signature of the issuers over the voucher
    :param voucher: The voucher the signature was requested with
    :param verification_key: The (aggregated) verification key of the issuers
    :return: The credential
    """
    public_attributes = spend_public_attributes(raw_identity)
    try:
        params = Parameters(TOTAL_ATTRIBUTES)
    except CoconutError as err:
        raise Error(ErrorKind.MALFORMED_REQUEST, "could not setup the parameters: %s" % err) from err

    serial_number, binding_number = voucher.get_private_attributes()
    try:
        credential = prepare_credential_for_spending(params, public_attributes, serial_number, binding_number,
                                                     signature, verification_key, rng)
    except CoconutError as err:
        raise Error(ErrorKind.MALFORMED_REQUEST, "could not prepare the credential: %s" % err) from err
    logger.debug("Prepared credential for spending the voucher of transaction %s", voucher.tx_hash.hex())
    return credential
