from petlib.pack import encode, decode

from client import prove_credential
from helper import Parameters, hash_to_scalar
from theta import Theta
from verifier import verify_credential


class Credential:
    def __init__(self, n_params, theta, public_attributes):
        """
        The credential the client presents when spending

        :param n_params: The number of attributes of the parameters it was created with
        :param theta: The proof over the private attributes and the randomized signature
        :param public_attributes: The public attributes as raw bytes, they are revealed in the clear
        """
        self.n_params = n_params
        self.theta = theta
        self.public_attributes = [bytes(attribute) for attribute in public_attributes]

    @property
    def blinded_serial_number(self):
        return self.theta.blinded_serial_number

    def verify(self, verification_key):
        """
        Verify the credential against the (aggregated) verification key of the issuers

        :return: True if the credential is valid
        """
        # The parameters follow the key, a credential claiming another size was not made for it
        n_params = len(verification_key.beta_g2)
        if not n_params or self.n_params != n_params:
            return False
        params = Parameters(n_params)
        hashed_public_attributes = [hash_to_scalar(attribute) for attribute in self.public_attributes]
        return verify_credential(params, verification_key, self.theta, hashed_public_attributes)

    def to_bytes(self):
        return encode([self.n_params, self.theta.to_bytes(), self.public_attributes])

    @classmethod
    def from_bytes(cls, data):
        n_params, theta, public_attributes = decode(data)
        return cls(n_params, Theta.from_bytes(theta), public_attributes)


def prepare_credential_for_spending(params, public_attributes, serial_number, binding_number, signature,
                                    verification_key, rng=None):
    """
    Create the credential out of the signature the issuers gave over the voucher

    :param public_attributes: The raw public attributes revealed at spending
    :param serial_number: The first private attribute of the voucher
    :param binding_number: The second private attribute of the voucher
    :param signature: The unblinded (aggregated) signature
    :param verification_key: The (aggregated) verification key of the issuers
    :return: The credential
    """
    theta = prove_credential(params, verification_key, signature, [serial_number, binding_number], rng)
    return Credential(len(params.hs), theta, public_attributes)
