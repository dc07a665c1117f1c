import helper
from theta import Theta


def verify_theta(params, verification_key, theta: Theta):
    """
    Verify the zkp create by the user
    Va = kappa^c * g2^rt * alpha^(1-c) * beta_i^rm_i
    Vt = nu^c * h^rt
    Vz = zeta^c * g2^rm_0

    :param verification_key: The aggregated vk from the issuers
    :param theta: The proof of the user containing the necessary elements
    :return: True if c = Hash(g1 || g2 || alpha || Va || Vt || Vz || zeta || hs || beta) false otherwise
    """
    g1, g2, hs = params.g1, params.g2, params.hs
    alpha, beta = verification_key.alpha, verification_key.beta_g2
    try:
        c, rm, rt = theta.pi_v
    except (TypeError, ValueError):
        return False
    if not rm or len(rm) > len(beta):
        return False
    h = theta.credential.h
    Va = c * theta.kappa + rt * g2 + (1 - c) * alpha  # For the attributes
    for i, rm_i in enumerate(rm):
        Va += rm_i * beta[i]
    Vt = c * theta.nu + rt * h  # For the randomness t
    Vz = c * theta.zeta + rm[0] * g2  # For the serial number
    return c == helper.to_challenge([g1, g2, alpha, Va, Vt, Vz, theta.zeta] + hs + beta)


def verify_credential(params, verification_key, theta: Theta, public_attributes):
    """
    Check the proof and then e(h, kappa * beta_j^public_attribute_j) = e(s * nu, g2)

    :param verification_key: The aggregated vk from the issuers
    :param theta: The proof of the user
    :param public_attributes: The hashed attributes revealed at spending, they follow the private ones in the key
    :return: True if everything is okay False otherwise
    """
    try:
        _, rm, _ = theta.pi_v
    except (TypeError, ValueError):
        return False
    num_private = len(rm)
    if num_private + len(public_attributes) > len(verification_key.beta_g2):
        return False
    if not verify_theta(params, verification_key, theta):
        return False
    e, g2 = params.e, params.g2
    # Add the public attributes in the kappa
    kappa = theta.kappa
    for i, attribute in enumerate(public_attributes):
        kappa = kappa + attribute * verification_key.beta_g2[num_private + i]
    h, s = theta.credential.h, theta.credential.s
    if h.isinf():
        return False  # Check if h is 1
    return e(h, kappa) == e(s + theta.nu, g2)
