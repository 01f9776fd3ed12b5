"""Tests for the ambiguous-notation heuristics."""
from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from services.lint.dom import build_tree
from services.lint.engine import run_lint
from services.lint.heuristics import find_function_names, is_index_like
from services.lint.schema_data import MATHML_NAMESPACE


def math(body: str) -> str:
    return f'<math xmlns="{MATHML_NAMESPACE}">{body}</math>'


def codes(body: str, profile: str = "authoring-guidance") -> set:
    return set(run_lint(math(body), {"profile": profile}).codes)


def mi_run(word: str) -> str:
    return "".join(f"<mi>{letter}</mi>" for letter in word)


# Function-name runs

@pytest.mark.parametrize("word, expected", [
    ("sin", ["sin"]),
    ("ln", ["ln"]),
    ("sinx", ["sin"]),
    ("arcsinh", ["arcsinh"]),
    ("xlog", ["log"]),
    ("xln", []),
    ("where", []),
    ("using", []),
    ("sincos", ["sin", "cos"]),
    ("xsiny", []),
])
def test_find_function_names(word, expected) -> None:
    assert find_function_names(word) == expected


def test_split_builtin_function() -> None:
    found = codes(mi_run("cos") + "<mi>x</mi>")
    assert "L028" in found
    assert "L029" not in found


def test_split_two_letter_function_covering_run() -> None:
    assert "L028" in codes(mi_run("ln") + "<mo>(</mo><mi>x</mi><mo>)</mo>")


def test_split_operatorname_function() -> None:
    found = codes(mi_run("sgn") + "<mo>(</mo><mi>x</mi><mo>)</mo>")
    assert "L029" in found
    assert "L028" not in found


def test_plain_language_run() -> None:
    assert "L032" in codes(mi_run("where") + "<mi>x</mi>")


def test_short_prose_word() -> None:
    assert "L032" in codes(mi_run("if"))


def test_prose_word_containing_function_name() -> None:
    found = codes(mi_run("using") + "<mi>x</mi>")
    assert "L032" in found
    assert "L028" not in found


def test_short_variable_product_is_not_prose() -> None:
    found = codes(mi_run("abc"))
    assert not found & {"L028", "L029", "L032"}


def test_uppercase_letters_are_not_function_runs() -> None:
    assert not codes(mi_run("SIN")) & {"L028", "L029", "L032"}


# Function application

def test_function_as_script_base_deferred_to_construct() -> None:
    applied = "<msup><mi>sin</mi><mn>2</mn></msup><mo>&#x2061;</mo><mi>x</mi>"
    assert "L031" not in codes(applied)
    assert "L031" in codes("<msup><mi>sin</mi><mn>2</mn></msup><mi>x</mi>")


def test_function_name_as_script_label() -> None:
    assert "L031" not in codes("<msub><mi>x</mi><mi>max</mi></msub>")


def test_function_name_does_not_imply_invisible_times() -> None:
    found = codes("<mi>sin</mi><mi>x</mi>")
    assert "L031" in found
    assert "L037" not in found


# Script bases and large operators

def test_fullwidth_closing_fence_base() -> None:
    assert "L025" in codes("<msub><mo>）</mo><mi>n</mi></msub>")


def test_opening_fence_base_is_not_suspicious() -> None:
    assert "L025" not in codes("<msup><mo>(</mo><mn>2</mn></msup>")


def test_bare_large_operator_with_ungrouped_operand() -> None:
    assert "L027" in codes("<mo>&#x222B;</mo><mi>f</mi><mi>d</mi><mi>x</mi>")


def test_lim_word_is_a_large_operator() -> None:
    body = "<munder><mi>lim</mi><mrow><mi>n</mi><mo>→</mo><mi>∞</mi></mrow></munder><mi>a</mi><mi>n</mi>"
    assert "L027" in codes(body)


def test_single_operand_needs_no_grouping() -> None:
    assert "L027" not in codes("<mo>&#x2211;</mo><mi>x</mi>")


def test_invisible_operator_is_skipped_when_finding_operand() -> None:
    body = "<mo>&#x2211;</mo><mo>&#x2062;</mo><mrow><mi>a</mi><mi>b</mi></mrow>"
    assert "L027" not in codes(body)


@pytest.mark.parametrize("limits", [
    "<msubsup><mo>&#x222B;</mo><mn>0</mn><mn>1</mn></msubsup>",
    "<munderover><mo>&#x2211;</mo><mi>k</mi><mi>n</mi></munderover>",
])
def test_limits_are_not_mistaken_for_the_operand(limits) -> None:
    body = limits + "<mrow><mi>f</mi><mo>&#x2061;</mo><mi>x</mi></mrow>"
    assert "L027" not in codes(body)


def test_scripted_operator_with_ungrouped_operand() -> None:
    body = "<msubsup><mo>&#x222B;</mo><mn>0</mn><mn>1</mn></msubsup><mi>f</mi><mi>d</mi><mi>x</mi>"
    assert "L027" in codes(body)


# Split numbers

def test_number_list_is_not_split_number() -> None:
    assert "L024" not in codes("<mn>1</mn><mo>,</mo><mn>2</mn>")


def test_split_number_inside_row() -> None:
    assert "L024" in codes("<mrow><mn>1</mn><mo>,</mo><mn>000</mn></mrow>")


# Invisible operators

def test_adjacent_operands_suggest_invisible_times() -> None:
    run = run_lint(math("<mn>2</mn><mi>x</mi>"))
    hint = next(f for f in run.findings if f.code == "L037")
    assert hint.severity == "info"


def test_explicit_invisible_times_is_clean() -> None:
    assert "L037" not in codes("<mn>2</mn><mo>&#x2062;</mo><mi>x</mi>")


def test_mixed_fraction_suggests_invisible_plus() -> None:
    found = codes("<mn>2</mn><mfrac><mn>1</mn><mn>2</mn></mfrac>")
    assert "L039" in found
    assert "L037" not in found


def test_mixed_fraction_with_invisible_plus() -> None:
    assert "L039" not in codes("<mn>2</mn><mo>&#x2064;</mo><mfrac><mn>1</mn><mn>2</mn></mfrac>")


def test_subscript_indices_need_separator() -> None:
    found = codes("<msub><mi>a</mi><mrow><mi>i</mi><mi>j</mi></mrow></msub>")
    assert "L038" in found
    assert "L037" not in found


@pytest.mark.parametrize("separator", ["&#x2063;", ","])
def test_subscript_indices_with_separator(separator) -> None:
    body = f"<msub><mi>a</mi><mrow><mi>i</mi><mo>{separator}</mo><mi>j</mi></mrow></msub>"
    assert "L038" not in codes(body)


def test_superscript_row_is_not_index_like() -> None:
    found = codes("<msup><mi>a</mi><mrow><mi>i</mi><mi>j</mi></mrow></msup>")
    assert "L038" not in found
    assert "L037" in found


def test_multiscript_slots_are_index_like() -> None:
    body = "<mmultiscripts><mi>R</mi><mrow><mi>i</mi><mi>j</mi></mrow><none/></mmultiscripts>"
    assert "L038" in codes(body)


def test_is_index_like_positions() -> None:
    root = build_tree(ET.fromstring(
        "<math><msub><mi>a</mi><mi>i</mi></msub><msup><mi>a</mi><mi>n</mi></msup>"
        "<mmultiscripts><mi>R</mi><mi>i</mi><mprescripts/><mi>j</mi></mmultiscripts></math>"
    ))
    msub, msup, multi = root.children
    assert not is_index_like(msub.children[0])
    assert is_index_like(msub.children[1])
    assert not is_index_like(msup.children[1])
    assert not is_index_like(multi.children[0])
    assert is_index_like(multi.children[1])
    assert not is_index_like(multi.children[2])
    assert is_index_like(multi.children[3])


# Spacing

def test_negative_mspace() -> None:
    assert "L034" in codes('<mi>a</mi><mspace width="-0.2em"/><mi>b</mi>')
    assert "L034" in codes('<mspace width="negativethinmathspace"/>')
    assert "L034" not in codes('<mspace width="0.2em"/>')


def test_negative_padding_is_overstrike() -> None:
    assert "L035" in codes('<mpadded lspace="-0.5em"><mi>x</mi></mpadded>')


def test_negative_space_with_visible_sibling_is_overstrike() -> None:
    found = codes('<mpadded><mo>=</mo><mspace width="-1em"/><mo>/</mo></mpadded>')
    assert "L035" in found
    assert "L034" in found


def test_positive_padding_is_clean() -> None:
    assert "L035" not in codes('<mpadded width="+1em"><mi>x</mi></mpadded>')


# Semantics

def test_annotation_xml_fallback() -> None:
    body = '<semantics><mi>x</mi><annotation-xml encoding="MathML-Content"><ci>x</ci></annotation-xml></semantics>'
    assert "L036" in codes(body)


def test_text_annotation_is_not_fallback() -> None:
    found = codes('<semantics><mi>x</mi><annotation encoding="application/x-tex">x</annotation></semantics>')
    assert not found & {"L036", "L062"}


def test_semantics_without_annotation_hint_is_profile_gated() -> None:
    body = "<semantics><mi>x</mi></semantics>"
    assert "L062" in codes(body)
    assert "L062" not in codes(body, profile="strict-core")


def test_large_mrow_hint() -> None:
    assert "L060" in codes(f"<mrow>{'<mi>x</mi><mo>+</mo>' * 3}</mrow>")
    assert "L060" not in codes(f"<mrow>{'<mi>x</mi><mo>+</mo>' * 2}<mi>x</mi></mrow>")
    assert "L060" not in codes(f"<mrow intent=\"sum\">{'<mi>x</mi><mo>+</mo>' * 3}</mrow>")


def test_multi_character_token_hints() -> None:
    assert "L061" in codes("<mi>abc</mi>")
    assert "L061" in codes("<mn>XII</mn>")
    assert "L061" not in codes("<mn>1,000.5</mn>")
    assert "L061" not in codes('<mi intent="velocity">vel</mi>')
    assert "L061" not in codes("<mi>abc</mi>", profile="strict-core")
