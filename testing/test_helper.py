import pytest
from petlib.bn import Bn

from helper import GROUP_ORDER, CoconutError, Parameters, Polynomial, hash_to_scalar


def test_hash_to_scalar():
    assert hash_to_scalar("1234") == hash_to_scalar("1234")
    assert hash_to_scalar("1234") == hash_to_scalar(b"1234")
    assert hash_to_scalar("1234") != hash_to_scalar("voucher info")
    assert hash_to_scalar(b"") != hash_to_scalar(b"\x00")
    assert 0 <= hash_to_scalar("voucher info") < GROUP_ORDER


def test_parameters():
    params = Parameters(4)
    assert len(params.hs) == 4
    assert len(set(h.export() for h in params.hs)) == 4
    with pytest.raises(CoconutError):
        Parameters(0)


def test_random_scalar(seeded_rng):
    params = Parameters(1, rng=seeded_rng)
    first = params.random_scalar()
    assert 0 <= first < params.o
    assert first != params.random_scalar()
    assert Parameters(1).random_scalar() != Parameters(1).random_scalar()


def test_lagrange_interpolation():
    secret = Bn(1337)
    coeff = [secret, Bn(42), Bn(7)]
    indexes = [1, 3, 5]
    l = Polynomial.lagrange_interpolation(indexes)
    result = Bn(0)
    for l_i, x in zip(l, indexes):
        result = (result + l_i * Polynomial.evaluate(coeff, x)) % GROUP_ORDER
    assert result == secret
