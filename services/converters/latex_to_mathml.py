"""
LaTeX → MathML source adapter.

Converts a LaTeX expression with latex2mathml so it can be linted like
hand-written MathML.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from latex2mathml.converter import convert as latex2mathml_convert

from core.logger import logger
from services.lint.engine import LintOptions, LintResult, run_lint
from services.lint.schema_data import MATHML_NAMESPACE

DISPLAY_MODES = ("block", "inline")

# $...$, $$...$$, \(...\) and \[...\]
_DELIMITERS = (
    re.compile(r"^\$\$(.*)\$\$$", re.DOTALL),
    re.compile(r"^\$(.*)\$$", re.DOTALL),
    re.compile(r"^\\\((.*)\\\)$", re.DOTALL),
    re.compile(r"^\\\[(.*)\\\]$", re.DOTALL),
)


class LatexToMathML:
    """Convert LaTeX to a namespaced MathML document."""

    def __init__(self, display: str = "block") -> None:
        if display not in DISPLAY_MODES:
            raise ValueError(f"display must be one of {DISPLAY_MODES}, got {display!r}")
        self.display = display

    def convert(self, latex: Optional[str]) -> str:
        latex = self._strip_delimiters(latex or "")
        if not latex:
            raise ValueError("Enter LaTeX input before converting.")

        # Collapse formatting newlines so a single expression stays single-line
        latex = " ".join(latex.split())
        try:
            mathml = latex2mathml_convert(latex, xmlns=MATHML_NAMESPACE, display=self.display)
        except Exception as exc:
            logger.debug("latex2mathml failed for %r: %s", latex, exc)
            raise ValueError(f"LaTeX conversion failed: {exc}") from exc
        return mathml

    @staticmethod
    def _strip_delimiters(latex: str) -> str:
        latex = latex.strip()
        for pattern in _DELIMITERS:
            match = pattern.match(latex)
            if match:
                return match.group(1).strip()
        return latex


@dataclass(frozen=True)
class LatexLintResult:
    latex: str
    mathml: str
    lint: LintResult

    def to_dict(self) -> dict:
        return {"latex": self.latex, "mathml": self.mathml, "lint": self.lint.to_dict()}


def lint_latex(
    latex: Optional[str],
    options: Union[LintOptions, Mapping, None] = None,
    display: str = "block",
) -> LatexLintResult:
    """Convert LaTeX and lint the generated MathML. Raises ValueError when conversion fails."""
    mathml = LatexToMathML(display=display).convert(latex)
    return LatexLintResult(latex=latex or "", mathml=mathml, lint=run_lint(mathml, options))
