"""
Strategy Selector

Chooses the upscaling algorithm for an image: a user override when one is
given, otherwise the recommendation carried by the content profile.
"""

from typing import Optional, Tuple

from .analysis import ContentProfile
from .upsampling import Upscaler, canonical_name, get_upscaler


def select_algorithm(profile: ContentProfile, force_algorithm: Optional[str] = None) -> str:
    """Return the algorithm name to use for ``profile``.

    An override is returned normalized (stripped, lower-cased) but is not
    validated here; resolving it against the registry is left to
    :func:`resolve_upscaler`.
    """
    if force_algorithm is not None and force_algorithm.strip():
        return force_algorithm.strip().lower()
    return profile.recommended_algorithm


def resolve_upscaler(
    profile: ContentProfile,
    force_algorithm: Optional[str] = None,
    **overrides
) -> Tuple[str, Upscaler]:
    """Select an algorithm and instantiate it.

    Args:
        profile: Classifier output for the image
        force_algorithm: Optional registry key overriding the recommendation
        **overrides: Constructor parameters passed to the upscaler

    Returns:
        (canonical registry key, upscaler instance)

    Raises:
        UnknownAlgorithm: the selected name is not registered
    """
    name = canonical_name(select_algorithm(profile, force_algorithm))
    return name, get_upscaler(name, **overrides)


def describe_selection(profile: ContentProfile, force_algorithm: Optional[str] = None) -> str:
    """One-line explanation of why an algorithm was chosen.

    Names are compared by registry key, so an alias of the recommended
    algorithm counts as matching it.

    Raises:
        UnknownAlgorithm: the override is not registered
    """
    recommended = profile.recommended_algorithm
    if force_algorithm is None or not force_algorithm.strip():
        return f"{recommended} (auto-selected, based on {profile.content_type.value})"

    selected = canonical_name(select_algorithm(profile, force_algorithm))
    if selected == canonical_name(recommended):
        return f"{selected} (user choice, matches recommendation)"
    return f"{selected} (user choice, recommended: {recommended})"
