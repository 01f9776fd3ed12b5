"""Tests for lint profile resolution."""
from __future__ import annotations

import dataclasses

import pytest

from services.lint.profiles import DEFAULT_PROFILE, PROFILE_REGISTRY, list_profiles, resolve_profile


@pytest.mark.parametrize("identifier, subset, version", [
    ("authoring-guidance", "presentation", "mathml3"),
    ("strict-core", "core", "mathml3"),
    ("presentation-mathml3", "presentation", "mathml3"),
    ("core-mathml3", "core", "mathml3"),
    ("presentation-mathml4", "presentation", "mathml4"),
    ("core-mathml4", "core", "mathml4"),
    ("  Strict-Core ", "core", "mathml3"),
])
def test_resolve_known_identifiers(identifier, subset, version) -> None:
    profile = resolve_profile(identifier)
    assert (profile.subset, profile.version) == (subset, version)


@pytest.mark.parametrize("identifier", [None, "", "core-mathml5", "strict", 42])
def test_unknown_identifiers_fall_back(identifier) -> None:
    assert resolve_profile(identifier) is DEFAULT_PROFILE
    assert DEFAULT_PROFILE.id == "presentation-mathml3"


def test_profile_instances_pass_through() -> None:
    profile = PROFILE_REGISTRY["core-mathml4"]
    assert resolve_profile(profile) is profile


def test_core_profiles_flag_boundaries_and_hide_hints() -> None:
    core = resolve_profile("strict-core")
    assert core.is_core
    assert core.active_spec == "mathml-core"
    assert core.warn_for_profile_boundary
    assert not core.show_semantics_hints
    assert core.allow_content_in_annotations


def test_presentation_profiles_show_hints() -> None:
    presentation = resolve_profile("authoring-guidance")
    assert not presentation.is_core
    assert presentation.active_spec == "presentation"
    assert presentation.show_semantics_hints
    assert not presentation.warn_for_profile_boundary


def test_profiles_are_immutable() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_PROFILE.subset = "core"


def test_list_profiles() -> None:
    data = list_profiles()
    assert data["default"] == "presentation-mathml3"
    assert [p["id"] for p in data["profiles"]] == list(PROFILE_REGISTRY)
    assert data["aliases"]["strict-core"] == "core-mathml3"
    assert set(data["profiles"][0]) == {
        "id", "subset", "version", "show_semantics_hints",
        "warn_for_profile_boundary", "allow_content_in_annotations",
    }
