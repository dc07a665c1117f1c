import random

import pytest
from petlib.bn import Bn

import bandwidth
import identity
from bandwidth import (BANDWIDTH_VALUE, BandwidthVoucher, prepare_for_spending, spend_public_attributes,
                       verify_request_signature)
from credential import prepare_credential_for_spending
from error import Error, ErrorKind
from helper import Parameters, hash_to_scalar
from issuer import blind_sign
from verifier import verify_credential, verify_theta


def test_voucher_consistency(voucher):
    assert not BandwidthVoucher.verify_against_plain([], voucher.get_public_attributes_plain())
    assert not BandwidthVoucher.verify_against_plain(voucher.get_public_attributes(), [])
    assert not BandwidthVoucher.verify_against_plain(
        voucher.get_public_attributes(), [voucher.get_public_attributes_plain()[0], ""])
    assert not BandwidthVoucher.verify_against_plain(
        voucher.get_public_attributes(), ["", voucher.get_public_attributes_plain()[1]])
    assert not BandwidthVoucher.verify_against_plain(
        [voucher.get_public_attributes()[0], Bn(1)], voucher.get_public_attributes_plain())
    assert not BandwidthVoucher.verify_against_plain(
        [Bn(1), voucher.get_public_attributes()[1]], voucher.get_public_attributes_plain())
    assert BandwidthVoucher.verify_against_plain(voucher.get_public_attributes(), voucher.get_public_attributes_plain())


def test_verify_against_plain_wrong_lengths(voucher):
    attributes = voucher.get_public_attributes()
    plain = voucher.get_public_attributes_plain()
    assert not BandwidthVoucher.verify_against_plain(attributes[:1], plain)
    assert not BandwidthVoucher.verify_against_plain(attributes + [attributes[0]], plain)
    assert not BandwidthVoucher.verify_against_plain(attributes, plain[:1])
    assert not BandwidthVoucher.verify_against_plain(attributes, plain + [plain[0]])
    assert not BandwidthVoucher.verify_against_plain([], [])


def test_verify_against_plain_is_order_sensitive(voucher):
    value, info = voucher.get_public_attributes_plain()
    assert hash_to_scalar("1234") != hash_to_scalar("voucher info")
    assert not BandwidthVoucher.verify_against_plain(voucher.get_public_attributes(), [info, value])


@pytest.mark.parametrize("plain", [[None, "voucher info"], ["1234", 1234], [Bn(1234), "voucher info"]])
def test_verify_against_plain_with_non_text_plaintexts(voucher, plain):
    assert not BandwidthVoucher.verify_against_plain(voucher.get_public_attributes(), plain)


def test_public_attributes_are_hashed_plaintexts(voucher):
    assert voucher.get_public_attributes_plain() == ["1234", "voucher info"]
    assert voucher.get_public_attributes() == [hash_to_scalar("1234"), hash_to_scalar("voucher info")]


def test_accessors_are_idempotent(voucher):
    assert voucher.tx_hash == voucher.tx_hash == bytes(32)
    assert voucher.get_public_attributes() == voucher.get_public_attributes()
    assert voucher.get_public_attributes_plain() == voucher.get_public_attributes_plain()
    assert voucher.get_private_attributes() == voucher.get_private_attributes()
    assert voucher.pedersen_commitments_openings == voucher.pedersen_commitments_openings
    assert voucher.blind_sign_request is voucher.blind_sign_request
    assert voucher.encryption_key is voucher.encryption_key
    # The returned lists are copies
    voucher.get_private_attributes().clear()
    assert len(voucher.get_private_attributes()) == 2


def test_fresh_voucher(params, voucher):
    assert voucher.use_request
    assert len(voucher.get_private_attributes()) == 2
    assert len(voucher.pedersen_commitments_openings) == 2
    serial_number, binding_number = voucher.get_private_attributes()
    assert serial_number != binding_number
    assert voucher.blind_sign_request.verify(params, voucher.get_public_attributes())


def test_voucher_with_blind_sign_req(voucher, identity_keys, encryption_keys):
    reconstructed = BandwidthVoucher.new_with_blind_sign_req(
        voucher.get_private_attributes(),
        voucher.get_public_attributes_plain(),
        voucher.tx_hash,
        identity_keys.private_key,
        encryption_keys.private_key,
        voucher.pedersen_commitments_openings,
        voucher.blind_sign_request,
    )
    assert not reconstructed.use_request
    assert reconstructed.blind_sign_request is voucher.blind_sign_request
    assert reconstructed.encryption_key is encryption_keys.private_key
    assert reconstructed.get_private_attributes() == voucher.get_private_attributes()
    assert reconstructed.get_public_attributes() == voucher.get_public_attributes()
    assert BandwidthVoucher.verify_against_plain(reconstructed.get_public_attributes(),
                                                 reconstructed.get_public_attributes_plain())


def test_voucher_with_blind_sign_req_wrong_attributes(voucher, identity_keys, encryption_keys):
    with pytest.raises(Error) as err:
        BandwidthVoucher.new_with_blind_sign_req(
            voucher.get_private_attributes()[:1], voucher.get_public_attributes_plain(), voucher.tx_hash,
            identity_keys.private_key, encryption_keys.private_key, voucher.pedersen_commitments_openings,
            voucher.blind_sign_request)
    assert err.value.kind == ErrorKind.MALFORMED_REQUEST
    with pytest.raises(Error) as err:
        BandwidthVoucher.new_with_blind_sign_req(
            voucher.get_private_attributes(), ["1234"], voucher.tx_hash, identity_keys.private_key,
            encryption_keys.private_key, voucher.pedersen_commitments_openings, voucher.blind_sign_request)
    assert err.value.kind == ErrorKind.MALFORMED_REQUEST


def test_voucher_malformed_tx_hash(params, identity_keys, encryption_keys):
    with pytest.raises(Error) as err:
        BandwidthVoucher.new(params, "1234", "voucher info", bytes(31), identity_keys.private_key,
                             encryption_keys.private_key)
    assert err.value.kind == ErrorKind.MALFORMED_REQUEST


@pytest.mark.parametrize("tx_hash", ["00" * 16, list(range(32)), 32, None])
def test_voucher_tx_hash_is_checked_first(params, identity_keys, encryption_keys, tx_hash):
    def rng(n):
        raise AssertionError("no attribute should be sampled")

    with pytest.raises(Error) as err:
        BandwidthVoucher.new(params, "1234", "voucher info", tx_hash, identity_keys.private_key,
                             encryption_keys.private_key, rng)
    assert err.value.kind == ErrorKind.MALFORMED_REQUEST


def test_voucher_construction_failure(identity_keys, encryption_keys):
    # Not enough attributes in the parameters for 2 private and 2 public
    params = Parameters(3)
    with pytest.raises(Error) as err:
        BandwidthVoucher.new(params, "1234", "voucher info", bytes(32), identity_keys.private_key,
                             encryption_keys.private_key)
    assert err.value.kind == ErrorKind.CONSTRUCTION_FAILURE
    assert "blind sign request" in str(err.value)


def test_voucher_with_seeded_rng(params, identity_keys, encryption_keys):
    vouchers = [
        BandwidthVoucher.new(params, "1234", "voucher info", bytes(32), identity_keys.private_key,
                             encryption_keys.private_key, rng=random.Random(42).randbytes)
        for _ in range(2)
    ]
    assert vouchers[0].get_private_attributes() == vouchers[1].get_private_attributes()
    assert vouchers[0].blind_sign_request.to_bytes() == vouchers[1].blind_sign_request.to_bytes()


def test_sign_binds_request_to_transaction(params, voucher, identity_keys, encryption_keys):
    request = voucher.blind_sign_request
    signature = voucher.sign(request)
    public_key = identity_keys.public_key
    assert signature == voucher.sign(request)
    assert verify_request_signature(public_key, request, voucher.tx_hash, signature)
    assert not verify_request_signature(public_key, request, b"\x01" * 32, signature)
    other = BandwidthVoucher.new(params, "1234", "voucher info", bytes(32), identity_keys.private_key,
                                 encryption_keys.private_key)
    assert not verify_request_signature(public_key, other.blind_sign_request, voucher.tx_hash, signature)
    assert not verify_request_signature(identity.KeyPair.new().public_key, request, voucher.tx_hash, signature)


def test_bandwidth_value_bytes():
    encoded = spend_public_attributes(b"identity")[1]
    assert len(encoded) == 8
    assert int.from_bytes(encoded, "big") == BANDWIDTH_VALUE


def test_prepare_for_spending(params, voucher, issuer_key, identity_keys):
    vk = issuer_key.verification_key(params)
    blinded = blind_sign(params, issuer_key, voucher.blind_sign_request, voucher.get_public_attributes())
    signature = blinded.unblind(vk, voucher.pedersen_commitments_openings)
    assert signature.verify(params, vk, voucher.get_private_attributes() + voucher.get_public_attributes())

    raw_identity = identity_keys.public_key.to_bytes()
    credential = prepare_for_spending(raw_identity, signature, voucher, vk)
    serial_number, _ = voucher.get_private_attributes()
    assert credential.n_params == bandwidth.TOTAL_ATTRIBUTES
    assert credential.public_attributes == [raw_identity, BANDWIDTH_VALUE.to_bytes(8, "big")]
    assert credential.blinded_serial_number == serial_number * params.g2
    assert verify_theta(params, vk, credential.theta)
    # Both private attributes are carried into the proof
    assert verify_credential(params, vk, credential.theta, voucher.get_public_attributes())
    swapped = prepare_credential_for_spending(params, credential.public_attributes, serial_number, Bn(1), signature,
                                              vk)
    assert verify_theta(params, vk, swapped.theta)
    assert not verify_credential(params, vk, swapped.theta, voucher.get_public_attributes())


def test_prepare_for_spending_parameters_failure(monkeypatch, params, voucher, issuer_key):
    vk = issuer_key.verification_key(params)
    blinded = blind_sign(params, issuer_key, voucher.blind_sign_request, voucher.get_public_attributes())
    signature = blinded.unblind(vk, voucher.pedersen_commitments_openings)
    monkeypatch.setattr(bandwidth, "TOTAL_ATTRIBUTES", 0)
    with pytest.raises(Error) as err:
        prepare_for_spending(b"identity", signature, voucher, vk)
    assert err.value.kind == ErrorKind.MALFORMED_REQUEST
