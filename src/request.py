from petlib.pack import encode, decode

import helper
from helper import pack, unpack


class BlindSignRequest:
    def __init__(self, commitment, commitment_hash, private_attributes_commitments, pi_s):
        """
        The request the client sends to the issuers for a blind signature

        :param commitment: The commitment of all the attributes cm = g1^r * h_i^attribute_i
        :param commitment_hash: h = HashG1(cm), the common base used by the client and the issuers
        :param private_attributes_commitments: The pedersen commitments of the private attributes g1^o_i * h^m_i
        :param pi_s: The zero knowledge proof (c, rr, ro, rm) of the openings and the private attributes
        """
        self.commitment = commitment
        self.commitment_hash = commitment_hash
        self.private_attributes_commitments = private_attributes_commitments
        self.pi_s = pi_s

    def verify(self, params, public_attributes):
        """
        Verify the zkp created by the user
        Vc = (cm / h_pub_i^pub_attribute_i)^c * g1^rr * h_i^rm_i
        Vo_i = cm_i^c * g1^ro_i * h^rm_i

        :param params: The parameters of the scheme
        :param public_attributes: The hashed public attributes the commitment was created with
        :return: True if c = Hash(g1 || g2 || cm || h || Vc || hs || cm_i || Vo_i) false otherwise
        """
        G, g1, g2, hs = params.G, params.g1, params.g2, params.hs
        c, rr, ro, rm = self.pi_s
        cms = self.private_attributes_commitments
        if len(ro) != len(cms) or len(rm) != len(cms):
            return False
        if len(cms) + len(public_attributes) > len(hs):
            return False
        h = self.commitment_hash
        if h != G.hashG1(self.commitment.export()):
            return False
        # Remove the public attributes so only the private ones and the randomness are left in the commitment
        commitment_private = self.commitment
        for i, attribute in enumerate(public_attributes):
            commitment_private = commitment_private - attribute * hs[len(cms) + i]
        Vc = c * commitment_private + rr * g1
        for i in range(len(rm)):
            Vc += rm[i] * hs[i]
        Vo = [c * cms[i] + ro[i] * g1 + rm[i] * h for i in range(len(cms))]
        return c == helper.to_challenge([g1, g2, self.commitment, h, Vc] + hs + cms + Vo)

    def to_bytes(self):
        """
        The canonical encoding of the request. This is what gets signed together with the transaction hash
        """
        return encode([self.commitment, self.commitment_hash, self.private_attributes_commitments, self.pi_s])

    @classmethod
    def from_bytes(cls, data):
        commitment, commitment_hash, private_attributes_commitments, pi_s = decode(data)
        return cls(commitment, commitment_hash, list(private_attributes_commitments), tuple(pi_s))

    def to_json(self):
        """
        Just packs the whole class
        :return: The packed class
        """
        return pack(self.__dict__)

    @classmethod
    def from_json(cls, data):
        return cls(**unpack(data))

    def __eq__(self, other):
        if not isinstance(other, BlindSignRequest):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()
