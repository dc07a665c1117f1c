from bplib.bp import G1Elem, G2Elem
from petlib.pack import encode, decode

from helper import CoconutError, Polynomial
from signature import BlindedSignature


class SecretKey:
    def __init__(self, x, ys):
        """
        sk = (x, y_1,...,y_q), one y for each attribute

        :param x: The secret used for alpha
        :param ys: The secrets used for the betas
        """
        self.x = x
        self.ys = ys

    def verification_key(self, params):
        """
        vk = (g2^x, g1^y_1,...,g1^y_q, g2^y_1,...,g2^y_q)
        """
        g1, g2 = params.g1, params.g2
        return VerificationKey(self.x * g2, [y_i * g1 for y_i in self.ys], [y_i * g2 for y_i in self.ys])


class VerificationKey:
    def __init__(self, alpha, beta_g1, beta_g2):
        """
        The public key of an issuer, or the aggregated key of a set of issuers

        :param alpha: g2^x
        :param beta_g1: g1^y_i used by the client to unblind the signatures
        :param beta_g2: g2^y_i used to verify the signatures and the credentials
        """
        self.alpha = alpha
        self.beta_g1 = beta_g1
        self.beta_g2 = beta_g2

    def to_bytes(self):
        return encode([self.alpha, self.beta_g1, self.beta_g2])

    @classmethod
    def from_bytes(cls, data):
        alpha, beta_g1, beta_g2 = decode(data)
        return cls(alpha, list(beta_g1), list(beta_g2))

    def __eq__(self, other):
        if not isinstance(other, VerificationKey):
            return NotImplemented
        return self.alpha == other.alpha and self.beta_g1 == other.beta_g1 and self.beta_g2 == other.beta_g2


def keygen(params):
    """
    Generate the keys of a single issuer, one y for each h of the parameters

    :return: The secret key
    """
    x = params.random_scalar()
    ys = [params.random_scalar() for _ in params.hs]
    return SecretKey(x, ys)


def ttp_keygen(params, threshold, num_authorities):
    """
    A trusted third party generates the keys of all the issuers. It creates one random polynomial of degree
    threshold - 1 for x and one for each y and hands out the evaluation at i to the issuer i

    :param threshold: The minimum number of issuers we need
    :param num_authorities: The total number of issuers we have
    :return: The list with the secret keys of the issuers 1,...,n
    """
    if not 0 < threshold <= num_authorities:
        raise CoconutError("Invalid threshold %s for %s authorities" % (threshold, num_authorities))
    v = [params.random_scalar() for _ in range(threshold)]
    ws = [[params.random_scalar() for _ in range(threshold)] for _ in params.hs]
    keys = []
    for i in range(1, num_authorities + 1):
        x = Polynomial.evaluate(v, i)
        ys = [Polynomial.evaluate(w, i) for w in ws]
        keys.append(SecretKey(x, ys))
    return keys


def aggregate_verification_keys(params, vks):
    """
    Helper function to aggregate the verification keys from all the issuers

    :param vks: A list of the verification keys from each issuer, None for the ones that we do not have
    :return: The final vk that can be used to check the signature
    """
    # Since we using threshold we dont need all the keys so we check for None's and we keep only the ones with values
    # We also need their indexes for the langrange interpolation
    filtered_vks = [(i + 1, vk) for i, vk in enumerate(vks) if vk is not None]
    if not filtered_vks:
        raise CoconutError("Tried to aggregate an empty set of verification keys")
    indexes, filter_vk = zip(*filtered_vks)
    size = len(filter_vk[0].beta_g2)
    if any(len(vk.beta_g1) != size or len(vk.beta_g2) != size for vk in filter_vk):
        raise CoconutError("Tried to aggregate verification keys of different sizes")
    l = Polynomial.lagrange_interpolation(indexes)

    G = params.G
    aggr_alpha = G2Elem.inf(G)
    aggr_beta_g1 = [G1Elem.inf(G) for _ in range(size)]
    aggr_beta_g2 = [G2Elem.inf(G) for _ in range(size)]
    for j, vk in enumerate(filter_vk):
        aggr_alpha += l[j] * vk.alpha
        for i in range(size):
            aggr_beta_g1[i] += l[j] * vk.beta_g1[i]
            aggr_beta_g2[i] += l[j] * vk.beta_g2[i]
    return VerificationKey(aggr_alpha, aggr_beta_g1, aggr_beta_g2)


def blind_sign(params, secret_key, request, public_attributes):
    """
    Basic PS signatures over the commitments of the request
    First we check the proof of the request and then we add the public attributes directly on h since the user only
    committed the private ones separately
    c = h^x * cm_i^y_i * h^(y_j * public_attribute_j)

    :param secret_key: The secret key of which to use to sign
    :param request: The BlindSignRequest of the client
    :param public_attributes: The hashed public attributes
    :return: The blinded signature
    """
    x, y = secret_key.x, secret_key.ys
    cms = request.private_attributes_commitments
    if len(cms) + len(public_attributes) > len(y):
        raise CoconutError("Tried to sign more attributes (%s) than the key supports (%s)"
                           % (len(cms) + len(public_attributes), len(y)))
    if not request.verify(params, public_attributes):
        raise CoconutError("Failed to verify the proof of knowledge of the blind sign request")
    h = request.commitment_hash
    c = x * h
    for yi, cm_i in zip(y, cms):
        c += yi * cm_i
    for yi, attribute in zip(y[len(cms):], public_attributes):
        c += ((yi * attribute) % params.o) * h
    return BlindedSignature(h, c)
