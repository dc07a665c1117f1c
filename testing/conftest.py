import random

import pytest

import encryption
import identity
from bandwidth import TOTAL_ATTRIBUTES, BandwidthVoucher
from helper import Parameters
from issuer import keygen


@pytest.fixture
def params():
    return Parameters(TOTAL_ATTRIBUTES)


@pytest.fixture
def identity_keys():
    return identity.KeyPair.new()


@pytest.fixture
def encryption_keys():
    return encryption.KeyPair.new()


@pytest.fixture
def voucher(params, identity_keys, encryption_keys):
    return BandwidthVoucher.new(
        params,
        "1234",
        "voucher info",
        bytes(32),
        identity.PrivateKey.from_base58_string(identity_keys.private_key.to_base58_string()),
        encryption_keys.private_key,
    )


@pytest.fixture
def issuer_key(params):
    return keygen(params)


@pytest.fixture
def seeded_rng():
    """
    Deterministic source of randomness, every call of the fixture gives the same stream
    """
    return random.Random(1234).randbytes
