"""
Upscaler Registry

Decorator-based registration of upscaling algorithms. Each registration binds
a case-insensitive key (plus aliases) to an Upscaler class and the constructor
parameters of one preset, so a single class can back several keys
(``lanczos2``/``lanczos3``/``lanczos4``).

Registrations run once, when ``image_upscaling.core.upsampling`` imports its
algorithm modules. The table is exposed read-only.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type

from ..errors import UnknownAlgorithm
from .base import CostTier, Upscaler


@dataclass
class UpscalerSpec:
    """Metadata for a registered upscaler preset."""
    name: str
    factory: Type[Upscaler]
    tier: CostTier
    aliases: Tuple[str, ...] = ()
    default_params: Dict[str, Any] = field(default_factory=dict)
    preserves: str = ""
    introduces: str = ""
    description: str = ""

    def create(self, **overrides) -> Upscaler:
        """Instantiate the preset, applying constructor overrides."""
        params = {**self.default_params, **overrides}
        return self.factory(**params)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'class': self.factory.__name__,
            'tier': self.tier.name.lower(),
            'aliases': list(self.aliases),
            'default_params': dict(self.default_params),
            'preserves': self.preserves,
            'introduces': self.introduces,
            'description': self.description,
        }


_REGISTRY: Dict[str, UpscalerSpec] = {}
_ALIASES: Dict[str, str] = {}

# Read-only view of canonical key -> spec
UPSCALER_REGISTRY = MappingProxyType(_REGISTRY)


def _normalize(name: str) -> str:
    return name.strip().lower()


def register_upscaler(
    name: str,
    aliases: Sequence[str] = (),
    default_params: Optional[Dict[str, Any]] = None,
    preserves: str = "",
    introduces: str = "",
    description: str = ""
) -> Callable:
    """
    Class decorator registering one preset of an upscaler.

    Stack several decorators on the same class to register several presets.

    Usage:
        @register_upscaler(
            name='lanczos3',
            aliases=('lanczos',),
            default_params={'lobes': 3},
            preserves='sharp edges',
            introduces='slight ringing'
        )
        class Lanczos(Upscaler):
            ...

    Raises:
        ValueError: If the key or an alias is already registered
    """
    def decorator(cls: Type[Upscaler]) -> Type[Upscaler]:
        key = _normalize(name)
        alias_keys = tuple(_normalize(a) for a in aliases)

        for candidate in (key,) + alias_keys:
            if candidate in _REGISTRY or candidate in _ALIASES:
                raise ValueError(f"Upscaler name already registered: {candidate}")

        params = dict(default_params or {})
        doc = (cls.__doc__ or "").strip().splitlines()
        spec = UpscalerSpec(
            name=key,
            factory=cls,
            tier=cls(**params).tier,
            aliases=alias_keys,
            default_params=params,
            preserves=preserves,
            introduces=introduces,
            description=description or (doc[0] if doc else ""),
        )
        _REGISTRY[key] = spec
        for alias in alias_keys:
            _ALIASES[alias] = key
        return cls
    return decorator


def canonical_name(name: str) -> str:
    """Resolve a key or alias to its canonical key.

    Raises:
        UnknownAlgorithm: If the name is not registered
    """
    key = _normalize(name)
    key = _ALIASES.get(key, key)
    if key not in _REGISTRY:
        raise UnknownAlgorithm(name, list_upscalers())
    return key


def get_upscaler_spec(name: str) -> UpscalerSpec:
    """Get the registration metadata for a key or alias."""
    return _REGISTRY[canonical_name(name)]


def get_upscaler(name: str, **overrides) -> Upscaler:
    """Create an upscaler by key or alias.

    Args:
        name: Registry key or alias (case-insensitive)
        **overrides: Constructor parameter overrides (e.g. ``show_progress``)

    Raises:
        UnknownAlgorithm: If the name is not registered
    """
    return get_upscaler_spec(name).create(**overrides)


def list_upscalers() -> List[str]:
    """List canonical keys in registration order."""
    return list(_REGISTRY.keys())


def list_aliases() -> Dict[str, str]:
    """Map of alias -> canonical key."""
    return dict(_ALIASES)


def all_upscalers(**overrides) -> List[Upscaler]:
    """One instance per registered preset."""
    return [spec.create(**overrides) for spec in _REGISTRY.values()]


def upscalers_by_tier(tier: CostTier, **overrides) -> List[Upscaler]:
    """Instances of every preset in ``tier``."""
    return [spec.create(**overrides) for spec in _REGISTRY.values() if spec.tier == tier]


def names_by_tier(tier: CostTier) -> List[str]:
    return [key for key, spec in _REGISTRY.items() if spec.tier == tier]


def get_all_methods_info() -> Dict[str, Dict[str, Any]]:
    """Get info about all registered presets for reporting."""
    return {key: spec.to_dict() for key, spec in _REGISTRY.items()}
