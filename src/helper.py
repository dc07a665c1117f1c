from hashlib import sha256, sha512

from bplib.bp import BpGroup
from petlib.bn import Bn
from petlib.pack import encode, decode
from binascii import hexlify, unhexlify

# Domain separation tag for hashing the attributes, so the scalars never collide with the other hashes of the scheme
HASH_TO_SCALAR_DOMAIN = b"NYM-BANDWIDTH-V01-CS02-with-BLS12381SCALAR_XMD:SHA-512"

GROUP_ORDER = BpGroup().order()


class CoconutError(Exception):
    """
    Raised by the scheme when the parameters, keys or the attributes given do not fit together
    """


class Parameters:
    """
    The public parameters of the scheme. Previously a static helper, now every operation gets its own instance so that
    the number of the attributes is explicit
    """

    def __init__(self, num_attributes, rng=None):
        """
        Sets up the parameters of the class

        :param num_attributes: The maximum number of the attributes (private and public together)
        :param rng: Optional source of randomness, a callable n -> n random bytes. If it is missing the OpenSSL one of
        petlib is used
        """
        if num_attributes < 1:
            raise CoconutError("Tried to setup the parameters with %s attributes" % num_attributes)
        self.G = BpGroup()
        self.g1, self.g2 = self.G.gen1(), self.G.gen2()
        self.e, self.o = self.G.pair, self.G.order()
        # One h for each attribute
        self.hs = [self.G.hashG1(("h%s" % i).encode()) for i in range(num_attributes)]
        self.rng = rng

    def random_scalar(self, rng=None):
        """
        Sample a scalar in [0, o)

        :param rng: Overrides the source of randomness of the parameters for this call
        :return: The random scalar as Bn
        """
        rng = rng or self.rng
        if rng is None:
            return self.o.random()
        # 64 bytes so that the reduction mod o has negligible bias
        return Bn.from_binary(rng(64)) % self.o


class Polynomial:
    """
    Helper function that handles the polynomials for secret sharing
    """

    @staticmethod
    def evaluate(coeff, x):
        """
        We will use Horner's method to evaluate the polynomials https://en.wikipedia.org/wiki/Horner%27s_method
        p(x) = coff_0 + x*(coff_1 + x*(coff_2 + ... + x*(coff_n-1 + x*coff_n)))
        where coff_0 is the secret

        :param coeff: Coefficients of the polynomial
        :param x: The value x at which we evaluate the polynomial
        :return: The result of the evaluation
        """
        result = coeff[-1]  # Take coff_n and start multiplying with x and adding the next coeff one. Following formula
        for coff_i in reversed(coeff[:-1]):
            result = (result * x + coff_i) % GROUP_ORDER
        return result

    @staticmethod
    def lagrange_interpolation(indexes):
        """
        Helper that generates all the Langrange interpolations
        l(x) = (xj-x)/(xj-xi) where i and j are the indexes and i different from j
        In our case the x is zero because we want to evaluate the polynomial at 0 in order to return the secret

        :param indexes: The list of indices to interpolate
        :return: The list of Langrange coefficients
        """
        if len(indexes) == 1:
            return [Bn(1)]
        o = GROUP_ORDER
        l = []
        for i in indexes:
            numerator, denominator = Bn(1), Bn(1)
            for j in indexes:
                if j != i:
                    numerator = (numerator * j) % o
                    denominator = (denominator * (j - i)) % o
            l.append((numerator * denominator.mod_inverse(o)) % o)
        return l


def to_challenge(elements):
    """
    Packages a challenge in a bijective way
    Taken from https://github.com/gdanezis/petlib/blob/master/examples/zkp.py
    and modified a bit

    :param elements: The elements to hash and concatinate
    """
    elements = [element.export() for element in elements]
    elem = [len(elements)] + elements
    elem_str = map(str, elem)
    elem_len = map(lambda x: "%s||%s" % (len(x), x), elem_str)
    state = "|".join(elem_len)
    H = sha256()
    H.update(state.encode("utf8"))
    return Bn.from_binary(H.digest())


def hash_to_scalar(msg):
    """
    Deterministically maps a plaintext attribute to a scalar of the group

    :param msg: The plaintext as bytes, strings are utf-8 encoded first
    :return: The scalar as Bn
    """
    if isinstance(msg, str):
        msg = msg.encode("utf-8")
    H = sha512()
    H.update(HASH_TO_SCALAR_DOMAIN)
    H.update(msg)
    return Bn.from_binary(H.digest()) % GROUP_ORDER


def ec_sum(elements):
    """
    Sum a non empty list of group elements
    """
    result = elements[0]
    for element in elements[1:]:
        result = result + element
    return result


"""
The following two functions are used to pack and unpack data in order to send it as text
"""


def pack(x):
    return hexlify(encode(x)).decode('utf-8')


def unpack(x):
    return decode(unhexlify(x.encode('utf-8')))
