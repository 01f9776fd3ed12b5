"""Lint profile registry and resolution."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Optional

from core.logger import logger

SUBSET_CORE = "core"
SUBSET_PRESENTATION = "presentation"

# Spec tier that a subset treats as authoritative
SUBSET_SPEC = MappingProxyType({
    SUBSET_CORE: "mathml-core",
    SUBSET_PRESENTATION: "presentation",
})


@dataclass(frozen=True)
class Profile:
    id: str
    subset: str
    version: str
    show_semantics_hints: bool
    warn_for_profile_boundary: bool
    allow_content_in_annotations: bool = True

    @property
    def is_core(self) -> bool:
        return self.subset == SUBSET_CORE

    @property
    def active_spec(self) -> str:
        return SUBSET_SPEC[self.subset]

    def to_dict(self) -> dict:
        return asdict(self)


def _profile(subset: str, version: str) -> Profile:
    core = subset == SUBSET_CORE
    return Profile(
        id=f"{subset}-{version}",
        subset=subset,
        version=version,
        show_semantics_hints=not core,
        warn_for_profile_boundary=core,
    )


PROFILE_REGISTRY = MappingProxyType({
    profile.id: profile
    for profile in (
        _profile(SUBSET_PRESENTATION, "mathml3"),
        _profile(SUBSET_CORE, "mathml3"),
        _profile(SUBSET_PRESENTATION, "mathml4"),
        _profile(SUBSET_CORE, "mathml4"),
    )
})

PROFILE_ALIASES = MappingProxyType({
    "authoring-guidance": "presentation-mathml3",
    "strict-core": "core-mathml3",
})

DEFAULT_PROFILE_ID = "presentation-mathml3"
DEFAULT_PROFILE = PROFILE_REGISTRY[DEFAULT_PROFILE_ID]


def resolve_profile(profile_identifier: Optional[str]) -> Profile:
    """Resolve an identifier to a Profile; anything unrecognized gets the default."""
    if isinstance(profile_identifier, Profile):
        return profile_identifier
    key = str(profile_identifier or "").strip().lower()
    key = PROFILE_ALIASES.get(key, key)
    profile = PROFILE_REGISTRY.get(key)
    if profile is None:
        if key:
            logger.debug("Unknown lint profile %r, using %s", profile_identifier, DEFAULT_PROFILE_ID)
        return DEFAULT_PROFILE
    return profile


def list_profiles() -> dict:
    """Registry and alias table, for profile selectors."""
    return {
        "default": DEFAULT_PROFILE_ID,
        "profiles": [profile.to_dict() for profile in PROFILE_REGISTRY.values()],
        "aliases": dict(PROFILE_ALIASES),
    }
