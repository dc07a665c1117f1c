from petlib.pack import encode, decode

from helper import pack, unpack
from signature import Signature


class Theta:
    def __init__(self, kappa, nu, zeta, credential, pi_v):
        """
        What the client shows to the verifier when spending the credential

        :param kappa: alpha * g2^t * beta_i^private_attribute_i, hides the private attributes
        :param nu: h^t used to remove the randomness t of kappa in the pairing
        :param zeta: g2^serial_number, the blinded serial number a double spending check can use
        :param credential: The randomized signature (h, s)
        :param pi_v: The proof (c, rm, rt) for the correct construction of kappa, nu and zeta
        """
        self.kappa = kappa
        self.nu = nu
        self.zeta = zeta
        self.credential = credential
        self.pi_v = pi_v

    @property
    def blinded_serial_number(self):
        return self.zeta

    def to_bytes(self):
        return encode([self.kappa, self.nu, self.zeta, self.credential.h, self.credential.s, self.pi_v])

    @classmethod
    def from_bytes(cls, data):
        kappa, nu, zeta, h, s, pi_v = decode(data)
        return cls(kappa, nu, zeta, Signature(h, s), tuple(pi_v))

    def to_json(self):
        return pack(self.to_bytes())

    @classmethod
    def from_json(cls, data):
        return cls.from_bytes(unpack(data))
