"""Tests for the lint engine: scenarios, profiles and result invariants."""
from __future__ import annotations

import pytest

from services.lint.engine import (
    DEFAULT_VALIDATORS,
    LintOptions,
    apply_namespace_prefix_fixup,
    compare_lint,
    run_lint,
)
from services.lint.schema_data import MATHML_NAMESPACE

NS = f'xmlns="{MATHML_NAMESPACE}"'


def math(body: str, attrs: str = "") -> str:
    return f"<math {NS}{attrs}>{body}</math>"


def codes(source, **options) -> set:
    return set(run_lint(source, options or None).codes)


def finding(source, code, **options):
    return next(f for f in run_lint(source, options or None).findings if f.code == code)


CORPUS = [
    "",
    "   ",
    "<math><mi>x</math>",
    "<m:math><m:mi>x</m:mi></m:math>",
    math(""),
    math("<mi>x</mi>"),
    math("<msup><mo>)</mo><mn>2</mn></msup>"),
    math("<mn>200</mn><mo>,</mo><mn>300.87</mn>"),
    math("<mi>s</mi><mi>i</mi><mi>n</mi><mo>(</mo><mi>x</mi><mo>)</mo>"),
    math('<mfrac mathvariant="bold"><mi>a</mi><mi>b</mi></mfrac>'),
    math("<mfenced><mi>x</mi></mfenced><menclose><mi>y</mi></menclose>"),
    math("<semantics><mi>x</mi><annotation-xml><apply><plus/><ci>a</ci></apply></annotation-xml></semantics>"),
    math("<mrow><mi>a</mi><mi>b</mi><mi>c</mi><mi>d</mi><mi>e</mi><mi>f</mi></mrow>"),
    math('<mpadded lspace="-0.5em"><mi>=</mi><mspace width="-1em"/><mo>/</mo></mpadded>'),
    math("<mfrac><mi>a</mi></mfrac><msub><mi>a</mi><mrow><mi>i</mi><mi>j</mi></mrow></msub>"),
]


# Input handling

def test_empty_input_reports_single_info() -> None:
    for source in ("", "  \n\t ", None):
        result = run_lint(source)
        assert [f.code for f in result.findings] == ["L001"]
        assert result.findings[0].severity == "info"


def test_non_string_source_is_a_programmer_error() -> None:
    with pytest.raises(TypeError):
        run_lint(b"<math/>")


def test_invalid_xml_is_fail_fast() -> None:
    result = run_lint("<math><mi>x</math>")
    assert len(result.findings) == 1
    only = result.findings[0]
    assert only.code == "L002"
    assert only.severity == "error"
    assert "not well-formed" in only.message
    assert result.has_errors


def test_invalid_xml_drops_namespace_assumption() -> None:
    assert codes("<m:math><m:mi>x</m:math>") == {"L002"}


def test_source_length_counts_original_text() -> None:
    source = "<m:math><m:mi>x</m:mi></m:math>"
    assert run_lint(source).source_length == len(source)


# Root and namespace

def test_prefix_without_declaration_is_assumed() -> None:
    found = codes("<m:math><m:mi>x</m:mi></m:math>")
    assert "L006" in found
    assert not found & {"L002", "L003", "L004", "L005", "L010"}
    assert finding("<m:math><m:mi>x</m:mi></m:math>", "L006").severity == "info"


def test_declared_prefix_is_not_rewritten() -> None:
    source = f'<m:math xmlns:m="{MATHML_NAMESPACE}"><m:mi>x</m:mi></m:math>'
    fixed, assumption = apply_namespace_prefix_fixup(source)
    assert fixed == source
    assert assumption is None
    assert "L006" not in codes(source)


def test_fixup_inserts_declaration_after_root_name() -> None:
    fixed, assumption = apply_namespace_prefix_fixup('<?xml version="1.0"?>\n<m:math display="block"/>')
    assert f'<m:math xmlns:m="{MATHML_NAMESPACE}" display="block"/>' in fixed
    assert assumption.code == "L006"


def test_unexpected_root_warns_and_continues() -> None:
    found = codes(f"<mrow {NS}><mfrac><mi>a</mi></mfrac></mrow>")
    assert "L003" in found
    assert "L040" in found


def test_foreign_root_namespace() -> None:
    found = codes('<math xmlns="http://example.com/not-mathml"><mi>x</mi></math>')
    assert found == {"L004"}


def test_missing_namespace() -> None:
    found = codes("<math><mi>x</mi></math>")
    assert found == {"L005"}
    assert finding("<math><mi>x</mi></math>", "L005").severity == "warn"


def test_math_elements_are_linted_inside_foreign_wrappers() -> None:
    source = f'<div xmlns="http://www.w3.org/1999/xhtml"><math {NS}><msup><mo>)</mo><mn>2</mn></msup></math></div>'
    found = codes(source)
    assert "L003" in found
    assert "L025" in found
    assert "L010" not in found


# Clean input

def test_clean_expression_gets_ok_sentinel() -> None:
    result = run_lint(math("<mi>x</mi>", ' display="block"'))
    assert [f.code for f in result.findings] == ["L000"]
    assert result.findings[0].severity == "ok"


def test_empty_math_has_too_few_children() -> None:
    assert "L041" in codes(math(""))


# Scenarios

def test_lone_closing_fence_script_base() -> None:
    assert "L025" in codes(math("<msup><mo>)</mo><mn>2</mn></msup>"))


def test_grouped_script_base_is_clean() -> None:
    source = math(
        "<msup><mrow><mo>(</mo><mi>x</mi><mo>+</mo><mn>5</mn><mo>)</mo></mrow><mn>2</mn></msup>"
    )
    assert "L025" not in codes(source)


def test_split_number_literal() -> None:
    assert "L024" in codes(math("<mn>200</mn><mo>,</mo><mn>300.87</mn>"))


def test_numeric_mn_is_not_a_semantics_hint() -> None:
    assert "L061" not in codes(math("<mn>200.3</mn>"))


def test_split_builtin_function_letters() -> None:
    assert "L028" in codes(math("<mi>s</mi><mi>i</mi><mi>n</mi><mo>(</mo><mi>x</mi><mo>)</mo>"))


def test_function_without_application_marker() -> None:
    assert "L031" in codes(math("<mi>sin</mi><mo>(</mo><mi>x</mi><mo>)</mo>"))


def test_function_with_application_marker() -> None:
    assert "L031" not in codes(math("<mi>sin</mi><mo>&#x2061;</mo><mo>(</mo><mi>x</mi><mo>)</mo>"))


SUM = "<munderover><mo>&#x2211;</mo><mrow><mi>x</mi><mo>=</mo><mn>0</mn></mrow><mrow><mn>10</mn></mrow></munderover>"


def test_grouped_large_operator_operand() -> None:
    assert "L027" not in codes(math(SUM + "<mrow><mn>3</mn><msup><mi>x</mi><mn>3</mn></msup></mrow>"))


def test_ungrouped_large_operator_operand() -> None:
    assert "L027" in codes(math(SUM + "<mn>3</mn><msup><mi>x</mi><mn>3</mn></msup>"))


def test_mmultiscripts_is_known() -> None:
    source = math("<mmultiscripts><mi>x</mi><mi>a</mi><mi>b</mi><mprescripts/><none/><mi>c</mi></mmultiscripts>")
    for profile in ("authoring-guidance", "strict-core"):
        found = codes(source, profile=profile)
        assert not found & {"L010", "L070"}


def test_mathvariant_on_mfrac_is_unknown_attribute() -> None:
    assert "L020" in codes(math('<mfrac mathvariant="bold"><mi>a</mi><mi>b</mi></mfrac>'))


def test_mathvariant_on_mo_is_not_unknown_attribute() -> None:
    found = codes(math('<mo mathvariant="bold">+</mo>'))
    assert "L020" not in found
    assert "L026" in found


# Profiles

def test_deprecated_tag_escalates_under_core() -> None:
    source = math("<mfenced><mi>x</mi></mfenced>")
    assert finding(source, "L011").severity == "warn"
    assert finding(source, "L011", profile="strict-core").severity == "error"


def test_profile_boundary_only_under_core() -> None:
    source = math('<menclose notation="box"><mi>x</mi></menclose>')
    assert "L070" not in codes(source)
    assert "L070" in codes(source, profile="core-mathml4")


def test_content_markup_allowed_in_annotations_under_core() -> None:
    source = math(
        "<semantics><mi>x</mi><annotation-xml encoding=\"MathML-Content\">"
        "<apply><plus/><ci>a</ci><ci>b</ci></apply></annotation-xml></semantics>"
    )
    assert "L070" not in codes(source, profile="strict-core")
    assert "L070" in codes(math("<apply><plus/><ci>a</ci></apply>"), profile="strict-core")


def test_unknown_profile_falls_back_to_default() -> None:
    result = run_lint(math("<mi>x</mi>"), {"profile": "no-such-profile"})
    assert result.profile.id == "presentation-mathml3"


def test_mathml4_profile_accepts_intent_everywhere() -> None:
    source = math('<mspace intent="gap" width="1em"/>')
    assert "L020" in codes(source)
    assert "L020" not in codes(source, profile="presentation-mathml4")


# Renderer metadata attributes

def test_renderer_attributes_ignored_by_default() -> None:
    source = math('<mi data-mjx-texclass="ORD">x</mi>')
    assert "L020" not in codes(source)


def test_renderer_attributes_flagged_when_strict() -> None:
    source = math('<mi data-mjx-texclass="ORD">x</mi>')
    assert "L020" in codes(source, ignoreDataMjxAttributes=False)
    assert "L020" in set(run_lint(source, LintOptions(ignore_data_mjx_attributes=False)).codes)


def test_foreign_prefixes_are_configurable() -> None:
    source = math('<mi data-sre-role="var">x</mi>')
    options = {"foreignAttributePrefixes": ["data-sre-"], "ignoreDataMjxAttributes": False}
    assert "L020" in codes(source, **options)
    # Without the prefix it is an ordinary data-* attribute
    assert "L020" not in codes(source, ignoreDataMjxAttributes=False)


def test_option_mapping_ignores_unknown_keys() -> None:
    options = LintOptions.from_mapping({"profile": "strict-core", "colour": "blue", "ignore_data_mjx_attributes": None})
    assert options.profile == "strict-core"
    assert options.ignore_data_mjx_attributes is LintOptions().ignore_data_mjx_attributes


# Result invariants

@pytest.mark.parametrize("source", CORPUS)
def test_never_empty(source) -> None:
    assert len(run_lint(source).findings) >= 1


@pytest.mark.parametrize("source", CORPUS)
def test_idempotent(source) -> None:
    assert run_lint(source).findings == run_lint(source).findings


@pytest.mark.parametrize("source", CORPUS)
def test_no_duplicate_findings(source) -> None:
    keys = [f.key for f in run_lint(source).findings]
    assert len(keys) == len(set(keys))


def test_repeated_issue_reported_once() -> None:
    frac = '<mfrac mathvariant="bold"><mi>a</mi><mi>b</mi></mfrac>'
    result = run_lint(math(frac + frac))
    assert result.codes.count("L020") == 1


STRUCTURAL_CODES = {"L012", "L020", "L022", "L023", "L030", "L040", "L041", "L050"}


@pytest.mark.parametrize("source", CORPUS)
def test_core_profile_keeps_structural_findings(source) -> None:
    presentation = {f.key[1:] for f in run_lint(source).findings if f.code in STRUCTURAL_CODES}
    core = {f.key[1:] for f in run_lint(source, {"profile": "strict-core"}).findings if f.code in STRUCTURAL_CODES}
    assert presentation <= core


@pytest.mark.parametrize("source", CORPUS[4:])
def test_validators_are_independent(source) -> None:
    full = {f.key for f in run_lint(source).findings if f.code != "L000"}
    combined = set()
    for validator in DEFAULT_VALIDATORS:
        alone = run_lint(source, validators=[validator])
        combined |= {f.key for f in alone.findings if f.code != "L000"}
    assert combined == full


def test_no_validators_still_checks_root() -> None:
    assert set(run_lint("<math><mi>x</mi></math>", validators=[]).codes) == {"L005"}
    assert run_lint(math("<mi>x</mi>"), validators=[]).codes == ["L000"]


def test_result_serialization() -> None:
    data = run_lint(math("<msup><mo>)</mo><mn>2</mn></msup>")).to_dict()
    assert set(data) == {"sourceLength", "profile", "findings"}
    entry = next(f for f in data["findings"] if f["code"] == "L025")
    assert set(entry) == {"severity", "code", "title", "message", "reference", "references"}
    assert entry["reference"] == entry["references"][0]["url"]
    assert {"label", "url", "type"} <= set(entry["references"][0])


# Side-by-side comparison

def test_compare_reports_code_differences() -> None:
    broken = math("<msup><mo>)</mo><mn>2</mn></msup>")
    fixed = math("<msup><mrow><mo>(</mo><mi>x</mi><mo>)</mo></mrow><mn>2</mn></msup>")
    comparison = compare_lint(broken, fixed)
    assert "L025" in comparison.only_first
    assert "L025" not in comparison.only_second
    assert not set(comparison.only_first) & set(comparison.shared)
    data = comparison.to_dict()
    assert set(data) == {"a", "b", "onlyA", "onlyB", "shared"}


def test_compare_uses_one_profile() -> None:
    comparison = compare_lint(math("<mi>x</mi>"), math("<mi>y</mi>"), {"profile": "strict-core"})
    assert comparison.first.profile is comparison.second.profile
    assert comparison.shared == ("L000",)
