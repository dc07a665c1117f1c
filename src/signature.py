from petlib.pack import encode, decode

from helper import ec_sum


class Signature:
    def __init__(self, h, s):
        """
        A PS signature (h, s) = (h, h^(x + y_i * m_i)) over the attributes

        :param h: The common base of the signature, must not be 1
        :param s: The signature itself
        """
        self.h = h
        self.s = s

    def randomise(self, params, rng=None):
        """
        Randomizes the signature to provide unlinkability
        sig_prime  = h^r, s^r

        :return: A randomized signature
        """
        r = params.random_scalar(rng)
        return Signature(self.h * r, self.s * r)

    def verify(self, params, verification_key, attributes):
        """
        Verify the signature over all the attributes (private first and then the public)
        e(h, alpha * beta_i ^ attribute_i) = e(s, g2)

        :return: True if it is correct false otherwise
        """
        if len(attributes) > len(verification_key.beta_g2):
            return False
        e, g2 = params.e, params.g2
        verification_result = verification_key.alpha
        for beta_i, attribute in zip(verification_key.beta_g2, attributes):
            verification_result = verification_result + attribute * beta_i
        return not self.h.isinf() and e(self.h, verification_result) == e(self.s, g2)

    def to_bytes(self):
        return encode([self.h, self.s])

    @classmethod
    def from_bytes(cls, data):
        return cls(*decode(data))

    def __eq__(self, other):
        if not isinstance(other, Signature):
            return NotImplemented
        return self.h == other.h and self.s == other.s


class BlindedSignature:
    def __init__(self, h, c):
        """
        The signature as the issuer returns it, still blinded with the pedersen openings of the client

        :param h: The commitment hash of the request
        :param c: h^x * cm_i^y_i * h^(y_j * public_attribute_j)
        """
        self.h = h
        self.c = c

    def unblind(self, verification_key, openings):
        """
        Unblind the blinded sig removing the openings used for the commitments of the private attributes
        s = c * (g1^y_i)^(-o_i)

        :param verification_key: The verification key of the issuer that signed
        :param openings: The pedersen commitment openings returned from prepare_blind_sign
        :return: The unblinded signature
        """
        if not openings:
            return Signature(self.h, self.c)
        blinding = ec_sum([o_i * beta_i for o_i, beta_i in zip(openings, verification_key.beta_g1)])
        return Signature(self.h, self.c - blinding)

    def to_bytes(self):
        return encode([self.h, self.c])

    @classmethod
    def from_bytes(cls, data):
        return cls(*decode(data))
