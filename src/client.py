from bplib.bp import G1Elem

import helper
from helper import CoconutError, Polynomial
from request import BlindSignRequest
from signature import Signature
from theta import Theta


def prepare_blind_sign(params, private_attributes, public_attributes, rng=None):
    """
    The client constructs a request to send to the issuers for a blind signature

    :param params: The parameters of the scheme
    :param private_attributes: The attributes that the issuers must not learn
    :param public_attributes: The attributes the issuers see in the clear
    :param rng: Optional source of randomness, overrides the one of the params
    :return: The pedersen commitment openings (needed to unblind) and the request
    """
    private_attributes, public_attributes = list(private_attributes), list(public_attributes)
    if not private_attributes:
        raise CoconutError("Tried to prepare blind sign request for an empty set of private attributes")
    if len(private_attributes) + len(public_attributes) > len(params.hs):
        raise CoconutError("Tried to prepare blind sign request for higher than specified in setup number of "
                           "attributes (max: %s, requested: %s)"
                           % (len(params.hs), len(private_attributes) + len(public_attributes)))
    G, g1 = params.G, params.g1
    commitment, commitment_opening = _create_commitment(params, private_attributes + public_attributes, rng)

    h = G.hashG1(commitment.export())
    openings = [params.random_scalar(rng) for _ in private_attributes]
    private_attributes_commitments = [o_i * g1 + m_i * h for o_i, m_i in zip(openings, private_attributes)]
    pi_s = _create_zkp_issuer(params, commitment, h, private_attributes_commitments, commitment_opening, openings,
                              private_attributes, rng)
    return openings, BlindSignRequest(commitment, h, private_attributes_commitments, pi_s)


def _create_commitment(params, attributes, rng):
    """
    Create the commitment of the attributes in order to generate a similar base for the issuers
    C = g1^r * h_i^attribute_i

    :return: The commitment and the randomness use to create it
    """
    g1, hs = params.g1, params.hs
    r = params.random_scalar(rng)
    C = r * g1
    for i, attribute in enumerate(attributes):
        C += attribute * hs[i]
    return C, r


def _create_zkp_issuer(params, C, h, cms, r, openings, private_attributes, rng):
    """
    Create the ZKP for the randomness r used for the commitment, for the openings of the pedersen commitments and for
    the private attributes
    Vc: For the commitment = g1^random_r * h_i^random_m_i
    Vo: For the pedersen commitments = g1^random_o_i * h^random_m_i
    c = Hash(g1 || g2 || C || h || Vc || hs || cm_i || Vo_i)
    rr = random_r - c * r
    ro = random_o_i - c * o_i
    rm = random_m_i - c * attribute_i

    :return: the challenge c and the responses rr, ro, rm see above
    """
    o, g1, g2, hs = params.o, params.g1, params.g2, params.hs
    # Compute witnesses
    wr = params.random_scalar(rng)  # Randomness for the r in the commitment
    wo = [params.random_scalar(rng) for _ in openings]  # Randomness for the openings
    wm = [params.random_scalar(rng) for _ in private_attributes]  # Randomness for the attributes
    # Compute the commitments
    Vc = wr * g1
    for i, wm_i in enumerate(wm):
        Vc += wm_i * hs[i]
    Vo = [wo_i * g1 + wm_i * h for wo_i, wm_i in zip(wo, wm)]
    # Compute the challenge
    c = helper.to_challenge([g1, g2, C, h, Vc] + hs + cms + Vo)
    # Compute the responses
    rr = (wr - c * r) % o
    ro = [(wo[i] - c * openings[i]) % o for i in range(len(wo))]
    rm = [(wm[i] - c * private_attributes[i]) % o for i in range(len(wm))]
    return c, rr, ro, rm


def aggregate_signatures(params, sigs):
    """
    Aggregate the unblinded signatures of the different issuers

    :param sigs: A list of the signatures, None for the issuers that did not answer
    :return: The aggregated signature
    """
    filter = []
    indexes = []
    for i, sig in enumerate(sigs):
        if sig is not None:
            filter.append(sig)
            indexes.append(i + 1)
    if not filter:
        raise CoconutError("Tried to aggregate an empty set of signatures")
    h = filter[0].h
    if any(sig.h != h for sig in filter):
        raise CoconutError("Tried to aggregate signatures with different h")
    l = Polynomial.lagrange_interpolation(indexes)
    aggr_sig = G1Elem.inf(params.G)
    for i in range(len(filter)):
        aggr_sig += l[i] * filter[i].s
    return Signature(h, aggr_sig)


def prove_credential(params, verification_key, signature, private_attributes, rng=None):
    """
    The proof the client shows when spending the credential. The signature is randomized and the private attributes are
    only given blinded in kappa. The first private attribute, the serial number, is also given as zeta = g2^serial

    :param verification_key: The (aggregated) verification key of the issuers
    :param signature: The unblinded signature
    :param private_attributes: The private attributes the signature was created with, serial number first
    :return: Theta
    """
    private_attributes = list(private_attributes)
    if not private_attributes:
        raise CoconutError("Tried to prove a credential with an empty set of private attributes")
    if len(private_attributes) > len(verification_key.beta_g2):
        raise CoconutError("Tried to prove a credential for higher than supported by the provided verification key "
                           "number of attributes (max: %s, requested: %s)"
                           % (len(verification_key.beta_g2), len(private_attributes)))
    g2 = params.g2
    # Randomise the sig
    sig_prime = signature.randomise(params, rng)
    # Create kappa and nu
    t = params.random_scalar(rng)
    kappa = t * g2 + verification_key.alpha
    for i, attribute in enumerate(private_attributes):
        kappa += attribute * verification_key.beta_g2[i]
    nu = t * sig_prime.h
    zeta = private_attributes[0] * g2
    pi_v = _create_zkp_verifier(params, verification_key, sig_prime.h, private_attributes, t, zeta, rng)
    return Theta(kappa, nu, zeta, sig_prime, pi_v)


def _create_zkp_verifier(params, verification_key, h, private_attributes, t, zeta, rng):
    """
    Create the ZKP for the randomness t used to create kappa and nu, for knowledge of the private attributes and for the
    serial number in zeta
    Va = alpha * beta_i^random_m_i * g2^random_t
    Vt = h^random_t
    Vz = g2^random_m_0
    c = Hash(g1 || g2 || alpha || Va || Vt || Vz || zeta || hs || beta)
    rm = random_m_i - c * attribute_i
    rt = random_t - c * t

    :return: The challenge c and the responses rm, rt see above
    """
    o, g1, g2, hs = params.o, params.g1, params.g2, params.hs
    alpha, beta = verification_key.alpha, verification_key.beta_g2
    wm = [params.random_scalar(rng) for _ in private_attributes]
    wt = params.random_scalar(rng)
    Va = wt * g2 + alpha
    for i, wm_i in enumerate(wm):
        Va += wm_i * beta[i]
    Vt = wt * h
    Vz = wm[0] * g2
    c = helper.to_challenge([g1, g2, alpha, Va, Vt, Vz, zeta] + hs + beta)
    rm = [(wm[i] - c * private_attributes[i]) % o for i in range(len(wm))]
    rt = (wt - c * t) % o
    return c, rm, rt
