"""Application entry point for the MathML lint service using FastAPI."""
from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from core.config import settings
from core.logger import init_logging, logger
from services.converters.latex_to_mathml import DISPLAY_MODES, lint_latex
from services.intent.suggestions import get_intent_suggestions
from services.lint.engine import LintOptions, compare_lint, run_lint
from services.lint.profiles import list_profiles


class LintOptionsModel(BaseModel):
    """Lint options shared by every lint request"""

    model_config = ConfigDict(populate_by_name=True)

    profile: Optional[str] = Field(None, description="Profile id or alias, e.g. 'strict-core'")
    ignore_data_mjx_attributes: Optional[bool] = Field(
        None, alias="ignoreDataMjxAttributes",
        description="Ignore renderer metadata attributes such as data-mjx-*",
    )
    foreign_attribute_prefixes: Optional[List[str]] = Field(
        None, alias="foreignAttributePrefixes",
        description="Attribute prefixes treated as renderer metadata",
    )

    def to_options(self) -> LintOptions:
        return LintOptions.from_mapping(
            self.model_dump(include={"profile", "ignore_data_mjx_attributes", "foreign_attribute_prefixes"},
                            exclude_none=True)
        )


class LintRequest(LintOptionsModel):
    """Request model for linting one expression"""

    source: str = Field("", description="MathML source")


class CompareRequest(LintOptionsModel):
    """Request model for linting two expressions side by side"""

    source_a: str = Field("", alias="sourceA", description="First MathML expression")
    source_b: str = Field("", alias="sourceB", description="Second MathML expression")


class LatexLintRequest(LintOptionsModel):
    """Request model for converting LaTeX and linting the result"""

    latex: str = Field(..., description="LaTeX expression")
    display: str = Field("block", description="'block' or 'inline'")


class IntentRequest(BaseModel):
    """Request model for intent suggestions"""

    source: str = Field("", description="MathML source")


def create_app() -> FastAPI:
    """Create FastAPI app exposing lint, compare, LaTeX and intent routes."""
    app = FastAPI(title="MathML Lint", version="0.1.0")

    @app.on_event("startup")
    async def startup_event() -> None:
        init_logging()
        logger.info("FastAPI service started (default profile: %s)", settings.default_profile)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/profiles")
    async def profiles() -> dict:
        return list_profiles()

    @app.post("/lint")
    async def lint(request: LintRequest) -> dict:
        return run_lint(request.source, request.to_options()).to_dict()

    @app.post("/lint/compare")
    async def lint_compare(request: CompareRequest) -> dict:
        return compare_lint(request.source_a, request.source_b, request.to_options()).to_dict()

    @app.post("/lint/latex")
    async def lint_latex_route(request: LatexLintRequest) -> dict:
        if request.display not in DISPLAY_MODES:
            raise HTTPException(status_code=422, detail=f"display must be one of {list(DISPLAY_MODES)}")
        try:
            result = lint_latex(request.latex, request.to_options(), display=request.display)
        except ValueError as exc:
            logger.info("LaTeX conversion rejected: %s", exc)
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return result.to_dict()

    @app.post("/intent")
    async def intent(request: IntentRequest) -> dict:
        return get_intent_suggestions(request.source)

    return app

