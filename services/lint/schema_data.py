"""
MathML element and attribute catalog (MathML 3 presentation + content markup).

Pure declarative data. Every element entry carries:
    specs               spec tiers the element belongs to
    child_count         ChildCount bounds on element children
    allowed_children    tag list, or "any-content" / "any-xml"
                        ("text" and "html-phrasing" are pseudo-children)
    allowed_attributes  attribute names, wildcards "data-*" / "on*" allowed
    only_valid_in       parent tags the element may appear under (optional)
    deprecated          legacy element flag (optional)
    deprecated_attributes  attributes still accepted but superseded (optional)
    required_attributes    alternative attribute sets, one must be present (optional)
    child_roles         names of fixed-position children (optional)

Normalization into lookup tables lives in schema_adapter.py.
"""
from __future__ import annotations

import math


class SpecLevel:
    MATHML_CORE = "mathml-core"
    PRESENTATION = "presentation"
    CONTENT = "content"


class ChildCount:
    ZERO = {"min": 0, "max": 0}
    ZERO_OR_MORE = {"min": 0, "max": math.inf}
    ONE = {"min": 1, "max": 1}
    ONE_OR_MORE = {"min": 1, "max": math.inf}
    TWO_OR_MORE = {"min": 2, "max": math.inf}
    # Inferred mrow: any number of children, read as one row
    ONE_INFERRED = {"min": 0, "max": math.inf}
    TWO = {"min": 2, "max": 2}
    THREE = {"min": 3, "max": 3}
    CUSTOM = "custom"


MATHML_NAMESPACE = "http://www.w3.org/1998/Math/MathML"

CORE_AND_PRESENTATION = [SpecLevel.MATHML_CORE, SpecLevel.PRESENTATION]
PRESENTATION_ONLY = [SpecLevel.PRESENTATION]

FLOW_CONTENT = [
    "mi", "mn", "mo", "mtext", "mspace", "ms", "mrow", "mfrac", "msqrt",
    "mroot", "mstyle", "merror", "mpadded", "mphantom", "mfenced", "menclose",
    "msub", "msup", "msubsup", "munder", "mover", "munderover", "mmultiscripts",
    "mtable", "maction", "semantics", "a", "malignmark",
]

TOKEN_CHILDREN = ["text", "mglyph", "malignmark"]

# Valid on every element, presentation and content alike
UNIVERSAL_ATTRIBUTES = [
    "id", "class", "style", "data-*", "href",
    "autofocus", "tabindex", "nonce", "on*",
]

# Shared by almost every presentation element
PRESENTATION_COMMON = [
    "dir", "mathcolor", "mathbackground", "mathsize",
    "displaystyle", "scriptlevel",
]

TOKEN_ATTRIBUTES = [*UNIVERSAL_ATTRIBUTES, *PRESENTATION_COMMON, "mathvariant"]
LAYOUT_ATTRIBUTES = [*UNIVERSAL_ATTRIBUTES, *PRESENTATION_COMMON]


# Attribute catalog: value type, enumerations and spec tiers.
ATTRIBUTE_DEFINITIONS = {
    "id": {"type": "string", "specs": CORE_AND_PRESENTATION},
    "class": {"type": "string", "specs": CORE_AND_PRESENTATION},
    "style": {"type": "string", "specs": CORE_AND_PRESENTATION},
    "data-*": {"type": "string", "specs": CORE_AND_PRESENTATION, "pattern": r"^data-"},
    "href": {"type": "uri", "specs": CORE_AND_PRESENTATION},
    "autofocus": {"type": "boolean", "specs": CORE_AND_PRESENTATION},
    "tabindex": {"type": "integer", "specs": CORE_AND_PRESENTATION},
    "nonce": {"type": "string", "specs": CORE_AND_PRESENTATION},
    "on*": {"type": "string", "specs": CORE_AND_PRESENTATION, "pattern": r"^on"},

    "dir": {"type": "enum", "values": ["ltr", "rtl"], "specs": CORE_AND_PRESENTATION},
    "mathcolor": {"type": "color", "specs": PRESENTATION_ONLY},
    "mathbackground": {"type": "color", "specs": PRESENTATION_ONLY},
    "mathsize": {
        "type": "length-or-keyword",
        "values": ["small", "normal", "big"],
        "specs": PRESENTATION_ONLY,
    },
    "mathvariant": {
        "type": "enum",
        "values": [
            "normal", "bold", "italic", "bold-italic", "double-struck",
            "bold-fraktur", "script", "bold-script", "fraktur", "sans-serif",
            "bold-sans-serif", "sans-serif-italic", "sans-serif-bold-italic",
            "monospace", "initial", "tailed", "looped", "stretched",
        ],
        "specs": PRESENTATION_ONLY,
    },
    "displaystyle": {"type": "boolean", "specs": CORE_AND_PRESENTATION},
    "scriptlevel": {"type": "integer-or-signed", "specs": CORE_AND_PRESENTATION},

    # Globally deprecated styling attributes
    "fontfamily": {"type": "string", "specs": PRESENTATION_ONLY, "deprecated": True},
    "fontweight": {
        "type": "enum", "values": ["normal", "bold"],
        "specs": PRESENTATION_ONLY, "deprecated": True,
    },
    "fontstyle": {
        "type": "enum", "values": ["normal", "italic"],
        "specs": PRESENTATION_ONLY, "deprecated": True,
    },
    "fontsize": {"type": "length", "specs": PRESENTATION_ONLY, "deprecated": True},
    "color": {"type": "color", "specs": PRESENTATION_ONLY, "deprecated": True},
    "background": {"type": "color", "specs": PRESENTATION_ONLY, "deprecated": True},

    # <math>
    "display": {"type": "enum", "values": ["block", "inline"], "specs": CORE_AND_PRESENTATION},
    "alttext": {"type": "string", "specs": CORE_AND_PRESENTATION},
    "xmlns": {"type": "string", "specs": CORE_AND_PRESENTATION},
    "macros": {"type": "string", "specs": PRESENTATION_ONLY, "deprecated": True},
    "mode": {
        "type": "enum", "values": ["display", "inline"],
        "specs": PRESENTATION_ONLY, "deprecated": True,
    },

    # <mo>
    "form": {"type": "enum", "values": ["prefix", "infix", "postfix"], "specs": CORE_AND_PRESENTATION},
    "fence": {"type": "boolean", "specs": CORE_AND_PRESENTATION},
    "separator": {"type": "boolean", "specs": CORE_AND_PRESENTATION},
    "lspace": {"type": "length", "specs": CORE_AND_PRESENTATION},
    "rspace": {"type": "length", "specs": CORE_AND_PRESENTATION},
    "stretchy": {"type": "boolean", "specs": CORE_AND_PRESENTATION},
    "symmetric": {"type": "boolean", "specs": CORE_AND_PRESENTATION},
    "maxsize": {"type": "length-or-keyword", "values": ["infinity"], "specs": CORE_AND_PRESENTATION},
    "minsize": {"type": "length", "specs": CORE_AND_PRESENTATION},
    "largeop": {"type": "boolean", "specs": CORE_AND_PRESENTATION},
    "movablelimits": {"type": "boolean", "specs": CORE_AND_PRESENTATION},
    "accent": {"type": "boolean", "specs": PRESENTATION_ONLY},

    # <mspace> / <mpadded>
    "width": {"type": "length", "specs": PRESENTATION_ONLY},
    "height": {"type": "length", "specs": PRESENTATION_ONLY},
    "depth": {"type": "length", "specs": PRESENTATION_ONLY},
    "voffset": {"type": "length-or-pseudo", "specs": PRESENTATION_ONLY},

    # <mfrac>
    "linethickness": {
        "type": "length-or-keyword",
        "values": ["thin", "medium", "thick"],
        "specs": CORE_AND_PRESENTATION,
    },
    "numalign": {"type": "enum", "values": ["left", "center", "right"], "specs": PRESENTATION_ONLY},
    "denomalign": {"type": "enum", "values": ["left", "center", "right"], "specs": PRESENTATION_ONLY},
    "bevelled": {"type": "boolean", "specs": PRESENTATION_ONLY},

    # <ms>
    "lquote": {"type": "string", "specs": PRESENTATION_ONLY},
    "rquote": {"type": "string", "specs": PRESENTATION_ONLY},

    # <mfenced>
    "open": {"type": "string", "specs": PRESENTATION_ONLY},
    "close": {"type": "string", "specs": PRESENTATION_ONLY},
    "separators": {"type": "string", "specs": PRESENTATION_ONLY},

    # <menclose>
    "notation": {
        "type": "string-list",
        "values": [
            "longdiv", "actuarial", "phasorangle", "radical", "box",
            "roundedbox", "circle", "left", "right", "top", "bottom",
            "updiagonalstrike", "downdiagonalstrike", "verticalstrike",
            "horizontalstrike", "northeastarrow", "madruwb", "text",
            "updiagonalarrow",
        ],
        "specs": PRESENTATION_ONLY,
    },

    # <munder> / <mover>
    "accentunder": {"type": "boolean", "specs": PRESENTATION_ONLY},

    # tables
    "align": {
        "type": "enum",
        "values": ["top", "bottom", "center", "baseline", "axis"],
        "specs": PRESENTATION_ONLY,
    },
    "rowalign": {
        "type": "string-list",
        "values": ["top", "bottom", "center", "baseline", "axis"],
        "specs": PRESENTATION_ONLY,
    },
    "columnalign": {
        "type": "string-list",
        "values": ["left", "center", "right"],
        "specs": PRESENTATION_ONLY,
    },
    "rowspan": {"type": "positive-integer", "specs": PRESENTATION_ONLY},
    "columnspan": {"type": "positive-integer", "specs": PRESENTATION_ONLY},

    # <mglyph>
    "src": {"type": "uri", "specs": PRESENTATION_ONLY},
    "alt": {"type": "string", "specs": PRESENTATION_ONLY},
    "valign": {"type": "length", "specs": PRESENTATION_ONLY},
    "index": {"type": "integer", "specs": PRESENTATION_ONLY, "deprecated": True},

    # <maction>
    "actiontype": {"type": "string", "specs": PRESENTATION_ONLY},
    "selection": {"type": "positive-integer", "specs": PRESENTATION_ONLY},

    # <semantics> / annotations
    "encoding": {"type": "string", "specs": CORE_AND_PRESENTATION},
    "cd": {"type": "string", "specs": PRESENTATION_ONLY},
    "name": {"type": "string", "specs": PRESENTATION_ONLY},

    # <a>
    "target": {"type": "string", "specs": CORE_AND_PRESENTATION},
}


def _presentation(specs, child_count, allowed_children, attributes, **extra):
    entry = {
        "specs": list(specs),
        "child_count": child_count,
        "allowed_children": allowed_children,
        "allowed_attributes": list(attributes),
    }
    entry.update(extra)
    return entry


PRESENTATION_ELEMENTS = {
    "math": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ONE_INFERRED, FLOW_CONTENT,
        [*TOKEN_ATTRIBUTES, "display", "alttext", "xmlns"],
        deprecated_attributes=["macros", "mode"],
    ),

    # Token elements
    "mi": _presentation(CORE_AND_PRESENTATION, ChildCount.ZERO_OR_MORE, TOKEN_CHILDREN, TOKEN_ATTRIBUTES),
    "mn": _presentation(CORE_AND_PRESENTATION, ChildCount.ZERO_OR_MORE, TOKEN_CHILDREN, TOKEN_ATTRIBUTES),
    "mo": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ZERO_OR_MORE, TOKEN_CHILDREN,
        [
            *TOKEN_ATTRIBUTES,
            "form", "fence", "separator", "lspace", "rspace",
            "stretchy", "symmetric", "maxsize", "minsize",
            "largeop", "movablelimits", "accent",
        ],
    ),
    "mtext": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ZERO_OR_MORE,
        [*TOKEN_CHILDREN, "html-phrasing"], TOKEN_ATTRIBUTES,
    ),
    "mspace": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ZERO, [],
        [*TOKEN_ATTRIBUTES, "width", "height", "depth"],
    ),
    "ms": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ZERO_OR_MORE, TOKEN_CHILDREN,
        [*TOKEN_ATTRIBUTES, "lquote", "rquote"],
    ),

    # General layout
    "mrow": _presentation(CORE_AND_PRESENTATION, ChildCount.ZERO_OR_MORE, FLOW_CONTENT, LAYOUT_ATTRIBUTES),
    "mfrac": _presentation(
        CORE_AND_PRESENTATION, ChildCount.TWO, FLOW_CONTENT,
        [*LAYOUT_ATTRIBUTES, "linethickness", "numalign", "denomalign", "bevelled"],
        child_roles=["numerator", "denominator"],
    ),
    "msqrt": _presentation(CORE_AND_PRESENTATION, ChildCount.ONE_INFERRED, FLOW_CONTENT, LAYOUT_ATTRIBUTES),
    "mroot": _presentation(
        CORE_AND_PRESENTATION, ChildCount.TWO, FLOW_CONTENT, LAYOUT_ATTRIBUTES,
        child_roles=["base", "index"],
    ),
    "mstyle": _presentation(CORE_AND_PRESENTATION, ChildCount.ONE_INFERRED, FLOW_CONTENT, TOKEN_ATTRIBUTES),
    "merror": _presentation(CORE_AND_PRESENTATION, ChildCount.ONE_INFERRED, FLOW_CONTENT, LAYOUT_ATTRIBUTES),
    "mpadded": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ONE_INFERRED, FLOW_CONTENT,
        [*LAYOUT_ATTRIBUTES, "width", "height", "depth", "lspace", "voffset"],
    ),
    "mphantom": _presentation(CORE_AND_PRESENTATION, ChildCount.ONE_INFERRED, FLOW_CONTENT, LAYOUT_ATTRIBUTES),
    "mfenced": _presentation(
        PRESENTATION_ONLY, ChildCount.ZERO_OR_MORE, FLOW_CONTENT,
        [*LAYOUT_ATTRIBUTES, "open", "close", "separators"],
        deprecated=True,
    ),
    "menclose": _presentation(
        PRESENTATION_ONLY, ChildCount.ONE_INFERRED, FLOW_CONTENT,
        [*LAYOUT_ATTRIBUTES, "notation"],
    ),

    # Scripts and limits
    "msub": _presentation(
        CORE_AND_PRESENTATION, ChildCount.TWO, FLOW_CONTENT, LAYOUT_ATTRIBUTES,
        child_roles=["base", "subscript"],
    ),
    "msup": _presentation(
        CORE_AND_PRESENTATION, ChildCount.TWO, FLOW_CONTENT, LAYOUT_ATTRIBUTES,
        child_roles=["base", "superscript"],
    ),
    "msubsup": _presentation(
        CORE_AND_PRESENTATION, ChildCount.THREE, FLOW_CONTENT, LAYOUT_ATTRIBUTES,
        child_roles=["base", "subscript", "superscript"],
    ),
    "munder": _presentation(
        CORE_AND_PRESENTATION, ChildCount.TWO, FLOW_CONTENT,
        [*LAYOUT_ATTRIBUTES, "accentunder"],
        child_roles=["base", "underscript"],
    ),
    "mover": _presentation(
        CORE_AND_PRESENTATION, ChildCount.TWO, FLOW_CONTENT,
        [*LAYOUT_ATTRIBUTES, "accent"],
        child_roles=["base", "overscript"],
    ),
    "munderover": _presentation(
        CORE_AND_PRESENTATION, ChildCount.THREE, FLOW_CONTENT,
        [*LAYOUT_ATTRIBUTES, "accent", "accentunder"],
        child_roles=["base", "underscript", "overscript"],
    ),
    "mmultiscripts": _presentation(
        CORE_AND_PRESENTATION, ChildCount.CUSTOM, [*FLOW_CONTENT, "mprescripts", "none"],
        LAYOUT_ATTRIBUTES,
    ),
    "mprescripts": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ZERO, [], UNIVERSAL_ATTRIBUTES,
        only_valid_in=["mmultiscripts"],
    ),
    # MathML Core renders <none/> inside mmultiscripts as an empty script
    "none": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ZERO, [], UNIVERSAL_ATTRIBUTES,
        only_valid_in=["mmultiscripts"],
    ),

    # Tables
    "mtable": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ZERO_OR_MORE, ["mtr", "mlabeledtr"],
        [*LAYOUT_ATTRIBUTES, "align", "rowalign", "columnalign"],
    ),
    "mtr": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ZERO_OR_MORE, ["mtd"],
        [*LAYOUT_ATTRIBUTES, "rowalign", "columnalign"],
        only_valid_in=["mtable"],
    ),
    "mlabeledtr": _presentation(
        PRESENTATION_ONLY, ChildCount.ONE_OR_MORE, ["mtd"],
        [*LAYOUT_ATTRIBUTES, "rowalign", "columnalign"],
        only_valid_in=["mtable"],
    ),
    "mtd": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ONE_INFERRED, [*FLOW_CONTENT, "maligngroup"],
        [*LAYOUT_ATTRIBUTES, "rowspan", "columnspan", "rowalign", "columnalign"],
        only_valid_in=["mtr", "mlabeledtr"],
    ),
    "maligngroup": _presentation(
        PRESENTATION_ONLY, ChildCount.ZERO, [], UNIVERSAL_ATTRIBUTES,
        only_valid_in=["mtd", "mtr"],
    ),
    "malignmark": _presentation(
        PRESENTATION_ONLY, ChildCount.ZERO, [], UNIVERSAL_ATTRIBUTES,
    ),

    # Miscellaneous
    "mglyph": _presentation(
        PRESENTATION_ONLY, ChildCount.ZERO, [],
        [*UNIVERSAL_ATTRIBUTES, "src", "alt", "width", "height", "valign", "fontfamily", "index"],
        only_valid_in=["mi", "mn", "mo", "mtext", "ms"],
        required_attributes=[["src", "alt"], ["fontfamily", "index"]],
        deprecated_attributes=["fontfamily", "index", "mathvariant", "mathsize"],
    ),
    "maction": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ONE_OR_MORE, FLOW_CONTENT,
        [*LAYOUT_ATTRIBUTES, "actiontype", "selection"],
        required_attributes=[["actiontype"]],
    ),
    "semantics": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ONE_OR_MORE,
        [*FLOW_CONTENT, "annotation", "annotation-xml"], LAYOUT_ATTRIBUTES,
    ),
    "annotation": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ZERO_OR_MORE, ["text"],
        [*UNIVERSAL_ATTRIBUTES, "encoding", "cd", "name", "src"],
        only_valid_in=["semantics"],
    ),
    "annotation-xml": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ZERO_OR_MORE, "any-xml",
        [*UNIVERSAL_ATTRIBUTES, "encoding", "cd", "name", "src"],
        only_valid_in=["semantics"],
    ),
    "a": _presentation(
        CORE_AND_PRESENTATION, ChildCount.ONE_OR_MORE, FLOW_CONTENT,
        [*LAYOUT_ATTRIBUTES, "href", "target"],
    ),
}


CONTENT_UNIVERSAL_ATTRIBUTES = list(UNIVERSAL_ATTRIBUTES)

CONTENT_ATTRIBUTE_DEFINITIONS = {
    "type": {"type": "string", "specs": [SpecLevel.CONTENT]},
    "base": {"type": "integer", "specs": [SpecLevel.CONTENT]},
    "cd": {"type": "string", "specs": [SpecLevel.CONTENT]},
    "name": {"type": "string", "specs": [SpecLevel.CONTENT]},
    "src": {"type": "uri", "specs": [SpecLevel.CONTENT]},
    "encoding": {"type": "string", "specs": [SpecLevel.CONTENT]},
    "closure": {
        "type": "enum",
        "values": ["open", "closed", "open-closed", "closed-open"],
        "specs": [SpecLevel.CONTENT],
    },
    "scope": {"type": "string", "specs": [SpecLevel.CONTENT], "deprecated": True},
    "nargs": {"type": "integer", "specs": [SpecLevel.CONTENT], "deprecated": True},
    "occurrence": {"type": "string", "specs": [SpecLevel.CONTENT], "deprecated": True},
}


def _content(child_count, allowed_children, attributes=None, **extra):
    entry = {
        "specs": [SpecLevel.CONTENT],
        "child_count": child_count,
        "allowed_children": allowed_children,
        "allowed_attributes": list(attributes or CONTENT_UNIVERSAL_ATTRIBUTES),
    }
    entry.update(extra)
    return entry


CONTENT_ELEMENTS = {
    # Token elements
    "ci": _content(
        ChildCount.ZERO_OR_MORE, ["text", "mglyph"],
        [*CONTENT_UNIVERSAL_ATTRIBUTES, "type"],
    ),
    "cn": _content(
        ChildCount.ZERO_OR_MORE, ["text", "sep"],
        [*CONTENT_UNIVERSAL_ATTRIBUTES, "type", "base"],
    ),
    "csymbol": _content(
        ChildCount.ZERO_OR_MORE, ["text"],
        [*CONTENT_UNIVERSAL_ATTRIBUTES, "cd", "type"],
    ),
    "cs": _content(ChildCount.ZERO_OR_MORE, ["text"]),
    "cbytes": _content(ChildCount.ZERO_OR_MORE, ["text"]),

    # Containers
    "apply": _content(ChildCount.ONE_OR_MORE, "any-content"),
    "bind": _content(ChildCount.TWO_OR_MORE, "any-content"),
    "share": _content(
        ChildCount.ZERO, [],
        [*CONTENT_UNIVERSAL_ATTRIBUTES, "src"],
        required_attributes=[["src"]],
    ),
    "cerror": _content(ChildCount.ONE_OR_MORE, "any-content"),

    # Binding and qualifiers
    "bvar": _content(
        ChildCount.ONE_OR_MORE, "any-content",
        only_valid_in=["bind", "apply"],
    ),
    "condition": _content(ChildCount.ONE, "any-content"),
    "domainofapplication": _content(ChildCount.ONE, "any-content"),
    "degree": _content(ChildCount.ONE, "any-content"),
    "momentabout": _content(ChildCount.ONE, "any-content"),
    "lowlimit": _content(ChildCount.ONE, "any-content"),
    "uplimit": _content(ChildCount.ONE, "any-content"),

    # Constructors
    "interval": _content(
        ChildCount.TWO, "any-content",
        [*CONTENT_UNIVERSAL_ATTRIBUTES, "closure"],
        child_roles=["start", "end"],
    ),
    "lambda": _content(ChildCount.TWO_OR_MORE, "any-content"),
    "piecewise": _content(ChildCount.ONE_OR_MORE, ["piece", "otherwise"]),
    "piece": _content(
        ChildCount.TWO, "any-content",
        child_roles=["value", "condition"], only_valid_in=["piecewise"],
    ),
    "otherwise": _content(
        ChildCount.ONE, "any-content",
        only_valid_in=["piecewise"],
    ),

    # Special
    "sep": _content(
        ChildCount.ZERO, [],
        only_valid_in=["cn"],
    ),
    "declare": _content(
        ChildCount.ONE_OR_MORE, "any-content",
        [*CONTENT_UNIVERSAL_ATTRIBUTES, "type", "scope", "nargs", "occurrence"],
        deprecated=True,
    ),
}


# Empty operator and constant elements used inside <apply>
CONTENT_OPERATORS = {
    "arithmetic": [
        "quotient", "factorial", "divide", "max", "min", "minus", "plus",
        "power", "rem", "times", "root", "gcd", "lcm",
    ],
    "relation": ["eq", "neq", "gt", "lt", "geq", "leq", "equivalent", "approx", "factorof"],
    "calculus": ["int", "diff", "partialdiff", "divergence", "grad", "curl", "laplacian"],
    "series": ["sum", "product", "limit"],
    "trigonometric": [
        "sin", "cos", "tan", "sec", "csc", "cot",
        "sinh", "cosh", "tanh", "sech", "csch", "coth",
        "arcsin", "arccos", "arctan", "arcsec", "arccsc", "arccot",
        "arcsinh", "arccosh", "arctanh", "arcsech", "arccsch", "arccoth",
    ],
    "elementary": [
        "exp", "ln", "log", "abs", "conjugate", "arg", "real", "imaginary",
        "floor", "ceiling",
    ],
    "statistics": ["mean", "sdev", "variance", "median", "mode", "moment"],
    "linalg": [
        "determinant", "transpose", "selector", "vectorproduct",
        "scalarproduct", "outerproduct",
    ],
    "set": [
        "set", "list", "union", "intersect", "in", "notin", "subset",
        "prsubset", "notsubset", "notprsubset", "setdiff", "card",
        "cartesianproduct",
    ],
    "logic": ["and", "or", "xor", "not", "implies", "forall", "exists"],
    "constant-set": ["integers", "reals", "rationals", "naturalnumbers", "complexes", "primes"],
    "constant": [
        "exponentiale", "imaginaryi", "notanumber", "true", "false",
        "emptyset", "pi", "eulergamma", "infinity",
    ],
}

for _names in CONTENT_OPERATORS.values():
    for _name in _names:
        CONTENT_ELEMENTS[_name] = _content(ChildCount.ZERO, [])


# One catalog per schema version. MathML 4 shares the MathML 3 element set;
# its differences are applied as named overlays by the schema adapter.
SCHEMA_CATALOGS = {
    "mathml3": {
        "presentation": PRESENTATION_ELEMENTS,
        "content": CONTENT_ELEMENTS,
        "attributes": ATTRIBUTE_DEFINITIONS,
        "content_attributes": CONTENT_ATTRIBUTE_DEFINITIONS,
        "universal_attributes": UNIVERSAL_ATTRIBUTES,
    },
    "mathml4": {
        "presentation": PRESENTATION_ELEMENTS,
        "content": CONTENT_ELEMENTS,
        "attributes": {
            **ATTRIBUTE_DEFINITIONS,
            "intent": {"type": "string", "specs": CORE_AND_PRESENTATION},
            "arg": {"type": "string", "specs": CORE_AND_PRESENTATION},
        },
        "content_attributes": CONTENT_ATTRIBUTE_DEFINITIONS,
        "universal_attributes": UNIVERSAL_ATTRIBUTES,
    },
}

SCHEMA_VERSIONS = tuple(SCHEMA_CATALOGS)
