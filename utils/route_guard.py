"""
Route Guard
Pure navigation decision from the session state and a required role-set.
"""

import enum


class GuardDecision(enum.Enum):
    INTERSTITIAL = 'interstitial'          # session still loading, decide later
    REDIRECT_LANDING = 'redirect_landing'  # no identity
    REDIRECT_DEFAULT = 'redirect_default'  # role not allowed here
    RENDER = 'render'


def decide(loading, identity, role, required_roles=()):
    """
    Decides what to do with a navigation request

    Args:
        loading (bool): Session store has not finished resolving
        identity: Current identity or None
        role: Role of the identity (ignored when identity is None)
        required_roles (iterable): Allowed roles; empty means any signed-in role

    Returns:
        GuardDecision
    """
    if loading:
        return GuardDecision.INTERSTITIAL
    if identity is None:
        return GuardDecision.REDIRECT_LANDING
    required = frozenset(required_roles or ())
    if required and role not in required:
        return GuardDecision.REDIRECT_DEFAULT
    return GuardDecision.RENDER
