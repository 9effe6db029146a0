"""Lookup tables for the LaTeX to Unicode translator."""

from __future__ import annotations

from typing import Final, Optional

LATEX_SYMBOLS: Final[dict[str, str]] = {
    # Greek lowercase
    "\\alpha": "α",
    "\\beta": "β",
    "\\gamma": "γ",
    "\\delta": "δ",
    "\\epsilon": "ϵ",
    "\\varepsilon": "ε",
    "\\zeta": "ζ",
    "\\eta": "η",
    "\\theta": "θ",
    "\\vartheta": "ϑ",
    "\\iota": "ι",
    "\\kappa": "κ",
    "\\lambda": "λ",
    "\\mu": "μ",
    "\\nu": "ν",
    "\\xi": "ξ",
    "\\pi": "π",
    "\\varpi": "ϖ",
    "\\rho": "ρ",
    "\\varrho": "ϱ",
    "\\sigma": "σ",
    "\\varsigma": "ς",
    "\\tau": "τ",
    "\\upsilon": "υ",
    "\\phi": "ϕ",
    "\\varphi": "φ",
    "\\chi": "χ",
    "\\psi": "ψ",
    "\\omega": "ω",
    # Greek uppercase
    "\\Gamma": "Γ",
    "\\Delta": "Δ",
    "\\Theta": "Θ",
    "\\Lambda": "Λ",
    "\\Xi": "Ξ",
    "\\Pi": "Π",
    "\\Sigma": "Σ",
    "\\Upsilon": "Υ",
    "\\Phi": "Φ",
    "\\Psi": "Ψ",
    "\\Omega": "Ω",
    # Binary operators
    "\\times": "×",
    "\\div": "÷",
    "\\pm": "±",
    "\\mp": "∓",
    "\\cdot": "⋅",
    "\\ast": "∗",
    "\\star": "⋆",
    "\\circ": "∘",
    "\\bullet": "∙",
    "\\oplus": "⊕",
    "\\ominus": "⊖",
    "\\otimes": "⊗",
    "\\oslash": "⊘",
    "\\odot": "⊙",
    "\\cap": "∩",
    "\\cup": "∪",
    "\\wedge": "∧",
    "\\land": "∧",
    "\\vee": "∨",
    "\\lor": "∨",
    "\\setminus": "∖",
    # Relations
    "\\leq": "≤",
    "\\le": "≤",
    "\\geq": "≥",
    "\\ge": "≥",
    "\\neq": "≠",
    "\\ne": "≠",
    "\\approx": "≈",
    "\\equiv": "≡",
    "\\cong": "≅",
    "\\sim": "∼",
    "\\simeq": "≃",
    "\\propto": "∝",
    "\\ll": "≪",
    "\\gg": "≫",
    "\\subset": "⊂",
    "\\supset": "⊃",
    "\\subseteq": "⊆",
    "\\supseteq": "⊇",
    "\\in": "∈",
    "\\notin": "∉",
    "\\ni": "∋",
    "\\perp": "⊥",
    "\\parallel": "∥",
    "\\mid": "∣",
    "\\vdash": "⊢",
    "\\models": "⊨",
    # Arrows
    "\\to": "→",
    "\\rightarrow": "→",
    "\\leftarrow": "←",
    "\\gets": "←",
    "\\leftrightarrow": "↔",
    "\\Rightarrow": "⇒",
    "\\Leftarrow": "⇐",
    "\\Leftrightarrow": "⇔",
    "\\implies": "⟹",
    "\\impliedby": "⟸",
    "\\iff": "⟺",
    "\\mapsto": "↦",
    "\\uparrow": "↑",
    "\\downarrow": "↓",
    "\\longrightarrow": "⟶",
    "\\longleftarrow": "⟵",
    # Big operators and misc
    "\\sum": "∑",
    "\\prod": "∏",
    "\\coprod": "∐",
    "\\int": "∫",
    "\\iint": "∬",
    "\\iiint": "∭",
    "\\oint": "∮",
    "\\bigcup": "⋃",
    "\\bigcap": "⋂",
    "\\infty": "∞",
    "\\partial": "∂",
    "\\nabla": "∇",
    "\\forall": "∀",
    "\\exists": "∃",
    "\\nexists": "∄",
    "\\emptyset": "∅",
    "\\varnothing": "∅",
    "\\neg": "¬",
    "\\lnot": "¬",
    "\\angle": "∠",
    "\\triangle": "△",
    "\\therefore": "∴",
    "\\because": "∵",
    "\\ldots": "…",
    "\\cdots": "⋯",
    "\\vdots": "⋮",
    "\\ddots": "⋱",
    "\\dots": "…",
    "\\prime": "′",
    "\\hbar": "ℏ",
    "\\ell": "ℓ",
    "\\Re": "ℜ",
    "\\Im": "ℑ",
    "\\aleph": "ℵ",
    "\\degree": "°",
    "\\langle": "⟨",
    "\\rangle": "⟩",
    "\\lceil": "⌈",
    "\\rceil": "⌉",
    "\\lfloor": "⌊",
    "\\rfloor": "⌋",
    "\\lbrace": "{",
    "\\rbrace": "}",
    "\\{": "{",
    "\\}": "}",
    "\\|": "‖",
    "\\%": "%",
    "\\$": "$",
    "\\&": "&",
    "\\#": "#",
    "\\_": "_",
    # Function names
    "\\sin": "sin",
    "\\cos": "cos",
    "\\tan": "tan",
    "\\cot": "cot",
    "\\sec": "sec",
    "\\csc": "csc",
    "\\arcsin": "arcsin",
    "\\arccos": "arccos",
    "\\arctan": "arctan",
    "\\sinh": "sinh",
    "\\cosh": "cosh",
    "\\tanh": "tanh",
    "\\log": "log",
    "\\ln": "ln",
    "\\exp": "exp",
    "\\lim": "lim",
    "\\max": "max",
    "\\min": "min",
    "\\sup": "sup",
    "\\inf": "inf",
    "\\det": "det",
    "\\gcd": "gcd",
    "\\deg": "deg",
    "\\dim": "dim",
    "\\ker": "ker",
    "\\mod": "mod",
    # Spacing
    "\\,": " ",
    "\\;": " ",
    "\\:": " ",
    "\\!": "",
    "\\ ": " ",
    "\\quad": "  ",
    "\\qquad": "    ",
    "\\\\": "\n",
    "\\displaystyle": "",
    "\\textstyle": "",
    "\\limits": "",
    "\\nolimits": "",
}

NOT_MAP: Final[dict[str, str]] = {
    "=": "≠",
    "<": "≮",
    ">": "≯",
    "∈": "∉",
    "∋": "∌",
    "⊂": "⊄",
    "⊃": "⊅",
    "⊆": "⊈",
    "⊇": "⊉",
    "≤": "≰",
    "≥": "≱",
    "≡": "≢",
    "∼": "≁",
    "≈": "≉",
    "≅": "≇",
    "∣": "∤",
    "∥": "∦",
    "∃": "∄",
}

# Combining-mark placement: first character, after the last one, or every one.
FIRST_CHAR = "first"
LAST_CHAR = "last"
ALL_CHARS = "all"

COMBINING: Final[dict[str, tuple[str, str]]] = {
    "\\hat": ("\u0302", FIRST_CHAR),
    "\\widehat": ("\u0302", FIRST_CHAR),
    "\\bar": ("\u0304", FIRST_CHAR),
    "\\tilde": ("\u0303", FIRST_CHAR),
    "\\widetilde": ("\u0303", FIRST_CHAR),
    "\\dot": ("\u0307", FIRST_CHAR),
    "\\ddot": ("\u0308", FIRST_CHAR),
    "\\vec": ("\u20D7", LAST_CHAR),
    "\\overrightarrow": ("\u20D7", LAST_CHAR),
    "\\acute": ("\u0301", FIRST_CHAR),
    "\\grave": ("\u0300", FIRST_CHAR),
    "\\breve": ("\u0306", FIRST_CHAR),
    "\\check": ("\u030C", FIRST_CHAR),
    "\\overline": ("\u0305", ALL_CHARS),
    "\\underline": ("\u0332", ALL_CHARS),
}

SUBSCRIPTS: Final[dict[str, str]] = dict(
    zip(
        "0123456789+-=()aehijklmnoprstuvxβγρφχ",
        "₀₁₂₃₄₅₆₇₈₉₊₋₌₍₎ₐₑₕᵢⱼₖₗₘₙₒₚᵣₛₜᵤᵥₓᵦᵧᵨᵩᵪ",
    )
)

SUPERSCRIPTS: Final[dict[str, str]] = dict(
    zip(
        "0123456789+-=()abcdefghijklmnoprstuvwxyzABDEGHIJKLMNOPRTUVWαβγδεθιφχ",
        "⁰¹²³⁴⁵⁶⁷⁸⁹⁺⁻⁼⁽⁾ᵃᵇᶜᵈᵉᶠᵍʰⁱʲᵏˡᵐⁿᵒᵖʳˢᵗᵘᵛʷˣʸᶻᴬᴮᴰᴱᴳᴴᴵᴶᴷᴸᴹᴺᴼᴾᴿᵀᵁⱽᵂᵅᵝᵞᵟᵋᶿᶥᵠᵡ",
    )
)
SUPERSCRIPTS["∘"] = "°"
SUPERSCRIPTS["′"] = "′"

FRAC_MAP: Final[dict[tuple[str, str], str]] = {
    ("1", "2"): "½",
    ("1", "3"): "⅓",
    ("2", "3"): "⅔",
    ("1", "4"): "¼",
    ("3", "4"): "¾",
    ("1", "5"): "⅕",
    ("2", "5"): "⅖",
    ("3", "5"): "⅗",
    ("4", "5"): "⅘",
    ("1", "6"): "⅙",
    ("5", "6"): "⅚",
    ("1", "7"): "⅐",
    ("1", "8"): "⅛",
    ("3", "8"): "⅜",
    ("5", "8"): "⅝",
    ("7", "8"): "⅞",
    ("1", "9"): "⅑",
    ("1", "10"): "⅒",
}


def _alphabet_map(
    upper_start: int,
    lower_start: int,
    digit_start: Optional[int] = None,
    exceptions: Optional[dict[str, str]] = None,
) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for index in range(26):
        mapping[chr(ord("A") + index)] = chr(upper_start + index)
        mapping[chr(ord("a") + index)] = chr(lower_start + index)
    if digit_start is not None:
        for index in range(10):
            mapping[chr(ord("0") + index)] = chr(digit_start + index)
    mapping.update(exceptions or {})
    return mapping


# None means the style has no Unicode rendering and text passes through.
LATEX_STYLES: Final[dict[str, Optional[dict[str, str]]]] = {
    "\\mathbf": _alphabet_map(0x1D400, 0x1D41A, 0x1D7CE),
    "\\boldsymbol": _alphabet_map(0x1D468, 0x1D482),
    "\\mathit": _alphabet_map(0x1D434, 0x1D44E, exceptions={"h": "ℎ"}),
    "\\mathbb": _alphabet_map(
        0x1D538,
        0x1D552,
        0x1D7D8,
        exceptions={
            "C": "ℂ",
            "H": "ℍ",
            "N": "ℕ",
            "P": "ℙ",
            "Q": "ℚ",
            "R": "ℝ",
            "Z": "ℤ",
        },
    ),
    "\\mathcal": _alphabet_map(
        0x1D49C,
        0x1D4B6,
        exceptions={
            "B": "ℬ",
            "E": "ℰ",
            "F": "ℱ",
            "H": "ℋ",
            "I": "ℐ",
            "L": "ℒ",
            "M": "ℳ",
            "R": "ℛ",
            "e": "ℯ",
            "g": "ℊ",
            "o": "ℴ",
        },
    ),
    "\\mathfrak": _alphabet_map(
        0x1D504,
        0x1D51E,
        exceptions={"C": "ℭ", "H": "ℌ", "I": "ℑ", "R": "ℜ", "Z": "ℨ"},
    ),
    "\\mathtt": _alphabet_map(0x1D670, 0x1D68A, 0x1D7F6),
    "\\mathrm": None,
    "\\mathsf": None,
}
