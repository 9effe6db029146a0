"""Recursive-descent LaTeX to Unicode translator.

Unknown commands are echoed verbatim and ``LatexConverter.convert`` never
raises: any internal failure returns the input unchanged.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import Callable

from .symbols import (
    ALL_CHARS,
    COMBINING,
    FIRST_CHAR,
    FRAC_MAP,
    LAST_CHAR,
    LATEX_STYLES,
    LATEX_SYMBOLS,
    NOT_MAP,
    SUBSCRIPTS,
    SUPERSCRIPTS,
)

logger = logging.getLogger(__name__)

_COMMAND_RE = re.compile(r"\\([a-zA-Z]+|.)", re.DOTALL)

TEXT_COMMANDS = frozenset(
    {"\\text", "\\operatorname", "\\mbox", "\\textrm", "\\textup", "\\mathop"}
)
CANCEL_COMMANDS = frozenset({"\\cancel", "\\bcancel", "\\xcancel", "\\sout"})
PHANTOM_COMMANDS = frozenset({"\\phantom", "\\hphantom", "\\vphantom"})
BINOM_COMMANDS = frozenset({"\\binom", "\\tbinom", "\\dbinom"})

MATRIX_DELIMITERS: dict[str, tuple[str, str]] = {
    "matrix": ("", ""),
    "pmatrix": ("(", ")"),
    "bmatrix": ("[", "]"),
    "Bmatrix": ("{", "}"),
    "vmatrix": ("|", "|"),
    "Vmatrix": ("‖", "‖"),
    "smallmatrix": ("", ""),
}
ALIGN_ENVIRONMENTS = frozenset(
    {
        "align",
        "align*",
        "aligned",
        "gather",
        "gather*",
        "gathered",
        "equation",
        "equation*",
        "multline",
        "multline*",
        "split",
        "flalign",
        "flalign*",
    }
)


def is_combining(char: str) -> bool:
    return unicodedata.combining(char) != 0


def translate_combining(command: str, text: str) -> str:
    sample = COMBINING.get(command)
    if sample is None or not text:
        return text
    mark, placement = sample
    if placement == FIRST_CHAR:
        index = 1
        while index < len(text) and (text[index].isspace() or is_combining(text[index])):
            index += 1
        return text[:index] + mark + text[index:]
    if placement == LAST_CHAR:
        return text + mark
    if placement == ALL_CHARS:
        return "".join(char + mark for char in text)
    return text


def make_not(negated: str) -> str:
    trimmed = negated.strip()
    if not trimmed:
        return " "
    if trimmed in NOT_MAP:
        return NOT_MAP[trimmed]
    return trimmed[0] + "̸" + trimmed[1:]


def try_make_subscript(text: str) -> str:
    """Return the full Unicode subscript of ``text``, or "" if not possible."""
    if not text or any(char not in SUBSCRIPTS for char in text):
        return ""
    return "".join(SUBSCRIPTS[char] for char in text)


def try_make_superscript(text: str) -> str:
    if not text or any(char not in SUPERSCRIPTS for char in text):
        return ""
    return "".join(SUPERSCRIPTS[char] for char in text)


def make_subscript(text: str) -> str:
    text = text.strip()
    if not text:
        return ""
    subscript = try_make_subscript(text)
    if subscript:
        return subscript
    if len(text) == 1:
        return "_" + text
    return "_(" + text + ")"


def make_superscript(text: str) -> str:
    text = text.strip()
    if not text:
        return ""
    superscript = try_make_superscript(text)
    if superscript:
        return superscript
    if len(text) == 1:
        return "^" + text
    return "^(" + text + ")"


def translate_styles(command: str, text: str) -> str:
    style_map = LATEX_STYLES.get(command)
    if not style_map:
        return text
    return "".join(style_map.get(char, char) for char in text)


def make_sqrt(index: str, radicand: str) -> str:
    if index in ("", "2"):
        radix = "√"
    elif index == "3":
        radix = "∛"
    elif index == "4":
        radix = "∜"
    else:
        superscript = try_make_superscript(index)
        radix = f"{superscript}√" if superscript else f"({index})√"
    return radix + translate_combining("\\overline", radicand)


def _maybe_parenthesize(text: str) -> str:
    for char in text:
        if not (char.isalnum() or is_combining(char) or char == "_"):
            return f"({text})"
    return text


def make_fraction(numerator: str, denominator: str) -> str:
    numerator, denominator = numerator.strip(), denominator.strip()
    if not numerator and not denominator:
        return ""
    vulgar = FRAC_MAP.get((numerator, denominator))
    if vulgar:
        return vulgar
    return f"{_maybe_parenthesize(numerator)}/{_maybe_parenthesize(denominator)}"


class LatexConverter:
    """Translate LaTeX math fragments into best-effort Unicode text."""

    def __init__(self) -> None:
        self._block_handlers: dict[str, Callable[[str, int], tuple[str, int]]] = {
            "\\frac": self._handle_frac,
            "\\dfrac": self._handle_frac,
            "\\tfrac": self._handle_frac,
            "\\sqrt": self._handle_sqrt,
            "\\boxed": self._wrap_block("[", "]"),
            "\\pmod": self._wrap_block(" (mod ", ")"),
            "\\overset": self._handle_over,
            "\\stackrel": self._handle_over,
            "\\underset": self._handle_under,
            "\\substack": self._handle_substack,
            "\\color": self._handle_color,
            "\\overbrace": self._combining_block("\\overline"),
            "\\underbrace": self._combining_block("\\underline"),
            "\\xrightarrow": self._handle_arrow("→"),
            "\\xleftarrow": self._handle_arrow("←"),
            "\\begin": self._handle_begin,
            "\\end": self._handle_end,
            "\\not": self._handle_not,
            "\\left": self._parse_delimiter,
            "\\right": self._parse_delimiter,
        }

    def convert(self, latex: str) -> str:
        try:
            return self.parse(latex)
        except Exception:
            logger.debug("LaTeX translation failed; returning input", exc_info=True)
            return latex

    def parse(self, latex: str) -> str:
        result: list[str] = []
        index = 0
        while index < len(latex):
            char = latex[index]
            if char == "\\":
                command, index = self._parse_command(latex, index)
                if command == "\\frac":
                    self._space_mixed_number(result)
                handled, index = self._handle_command(command, latex, index)
                result.append(handled)
            elif char == "{":
                block, index = self._parse_block(latex, index)
                result.append(block)
            elif char in "_^":
                index += 1
                argument = ""
                if index < len(latex) and latex[index] == "{":
                    argument, index = self._parse_block(latex, index)
                elif index < len(latex) and latex[index] == "\\":
                    command, index = self._parse_command(latex, index)
                    argument, index = self._handle_command(command, latex, index)
                elif index < len(latex):
                    argument = latex[index]
                    index += 1
                if char == "_":
                    result.append(make_subscript(argument))
                else:
                    result.append(make_superscript(argument))
            elif char.isspace():
                spaces, index = self._parse_spaces(latex, index)
                result.append(spaces)
            else:
                result.append(char)
                index += 1
        return "".join(result)

    @staticmethod
    def _space_mixed_number(result: list[str]) -> None:
        # "2\frac{1}{2}" renders as "2 ½" rather than "2½".
        if result and result[-1] and result[-1][-1].isdigit():
            result[-1] += " "

    def _handle_command(self, command: str, latex: str, index: int) -> tuple[str, int]:
        if command in LATEX_SYMBOLS:
            return LATEX_SYMBOLS[command], index
        handler = self._block_handlers.get(command)
        if handler is not None:
            return handler(latex, index)
        if command in COMBINING:
            argument, index = self._parse_block(latex, index)
            return translate_combining(command, argument), index
        if command in LATEX_STYLES:
            text, index = self._parse_block(latex, index)
            return translate_styles(command, text), index
        if command in TEXT_COMMANDS:
            return self._parse_block(latex, index)
        if command in BINOM_COMMANDS:
            upper, index = self._parse_block(latex, index)
            lower, index = self._parse_block(latex, index)
            return f"C({upper},{lower})", index
        if command in PHANTOM_COMMANDS:
            text, index = self._parse_block(latex, index)
            return " " * max(len(text), 1), index
        if command in CANCEL_COMMANDS:
            text, index = self._parse_block(latex, index)
            return translate_combining("\\underline", text), index
        return command, index

    def _handle_frac(self, latex: str, index: int) -> tuple[str, int]:
        numerator, index = self._parse_block(latex, index)
        denominator, index = self._parse_block(latex, index)
        return make_fraction(numerator, denominator), index

    def _handle_sqrt(self, latex: str, index: int) -> tuple[str, int]:
        option, index = self._parse_optional(latex, index)
        radicand, index = self._parse_block(latex, index)
        return make_sqrt(option.strip(), radicand.strip()), index

    def _handle_not(self, latex: str, index: int) -> tuple[str, int]:
        if index >= len(latex):
            return "̸", index
        if latex[index] == "\\":
            command, index = self._parse_command(latex, index)
            return make_not(LATEX_SYMBOLS.get(command) or command), index
        return make_not(latex[index]), index + 1

    def _handle_over(self, latex: str, index: int) -> tuple[str, int]:
        over, index = self._parse_block(latex, index)
        base, index = self._parse_block(latex, index)
        superscript = try_make_superscript(over)
        return (base + superscript if superscript else f"{base}^({over})"), index

    def _handle_under(self, latex: str, index: int) -> tuple[str, int]:
        under, index = self._parse_block(latex, index)
        base, index = self._parse_block(latex, index)
        subscript = try_make_subscript(under)
        return (base + subscript if subscript else f"{base}_({under})"), index

    def _handle_substack(self, latex: str, index: int) -> tuple[str, int]:
        raw, index = self._raw_block(latex, index)
        lines = [self.parse(line.strip()) for line in raw.split("\\\\") if line.strip()]
        return ", ".join(lines), index

    def _handle_color(self, latex: str, index: int) -> tuple[str, int]:
        _, index = self._raw_block(latex, index)
        return "", index

    def _handle_begin(self, latex: str, index: int) -> tuple[str, int]:
        name, index = self._parse_env_name(latex, index)
        marker = f"\\end{{{name}}}"
        end = latex.find(marker, index)
        if end == -1:
            return self._render_environment(name, latex[index:]), len(latex)
        return self._render_environment(name, latex[index:end]), end + len(marker)

    def _handle_end(self, latex: str, index: int) -> tuple[str, int]:
        _, index = self._parse_env_name(latex, index)
        return "", index

    def _wrap_block(
        self, prefix: str, suffix: str
    ) -> Callable[[str, int], tuple[str, int]]:
        def handler(latex: str, index: int) -> tuple[str, int]:
            text, index = self._parse_block(latex, index)
            return f"{prefix}{text}{suffix}", index

        return handler

    def _combining_block(self, command: str) -> Callable[[str, int], tuple[str, int]]:
        def handler(latex: str, index: int) -> tuple[str, int]:
            text, index = self._parse_block(latex, index)
            return translate_combining(command, text), index

        return handler

    def _handle_arrow(self, arrow: str) -> Callable[[str, int], tuple[str, int]]:
        def handler(latex: str, index: int) -> tuple[str, int]:
            text, index = self._parse_block(latex, index)
            if text.strip():
                return f"{arrow}({text})", index
            return arrow, index

        return handler

    # Low-level scanning

    @staticmethod
    def _parse_command(latex: str, start: int) -> tuple[str, int]:
        match = _COMMAND_RE.match(latex, start)
        if match is None:
            return "\\", start + 1
        return match.group(0), match.end()

    @staticmethod
    def _matching_end(latex: str, start: int, opener: str, closer: str) -> int:
        """Index just past the closer matching the opener at ``start``."""
        level, position = 1, start + 1
        while position < len(latex) and level > 0:
            if latex[position] == opener:
                level += 1
            elif latex[position] == closer:
                level -= 1
            position += 1
        return position

    def _raw_block(self, latex: str, start: int) -> tuple[str, int]:
        if start >= len(latex):
            return "", start
        if latex[start] != "{":
            return latex[start], start + 1
        end = self._matching_end(latex, start, "{", "}")
        closed = end <= len(latex) and latex[end - 1] == "}"
        return latex[start + 1 : end - 1 if closed else end], end

    def _parse_block(self, latex: str, start: int) -> tuple[str, int]:
        if start >= len(latex):
            return "", start
        if latex[start] != "{":
            if latex[start] == "\\":
                command, index = self._parse_command(latex, start)
                return self._handle_command(command, latex, index)
            return latex[start], start + 1
        raw, end = self._raw_block(latex, start)
        return self.parse(raw), end

    def _parse_optional(self, latex: str, start: int) -> tuple[str, int]:
        if start >= len(latex) or latex[start] != "[":
            return "", start
        end = self._matching_end(latex, start, "[", "]")
        closed = latex[end - 1] == "]"
        return self.parse(latex[start + 1 : end - 1 if closed else end]), end

    @staticmethod
    def _parse_spaces(latex: str, start: int) -> tuple[str, int]:
        end = start
        has_newline = False
        while end < len(latex) and latex[end].isspace():
            has_newline = has_newline or latex[end] == "\n"
            end += 1
        return ("\n\n" if has_newline else " "), end

    def _parse_delimiter(self, latex: str, index: int) -> tuple[str, int]:
        if index >= len(latex):
            return "", index
        char = latex[index]
        if char == "\\":
            command, end = self._parse_command(latex, index)
            return LATEX_SYMBOLS.get(command) or command[1:], end
        if char == ".":
            return "", index + 1
        return char, index + 1

    @staticmethod
    def _parse_env_name(latex: str, index: int) -> tuple[str, int]:
        if index < len(latex) and latex[index] == "{":
            close = latex.find("}", index)
            if close != -1:
                return latex[index + 1 : close], close + 1
        return "", index

    # Environments

    def _render_environment(self, name: str, content: str) -> str:
        if name in MATRIX_DELIMITERS:
            left, right = MATRIX_DELIMITERS[name]
            return self._render_matrix(content, left, right, compact=name == "smallmatrix")
        if name == "cases":
            return self._render_cases(content)
        if name in ALIGN_ENVIRONMENTS:
            return self._render_align(content)
        if name == "array":
            return self._render_array(content)
        return self.parse(content)

    @staticmethod
    def _rows(content: str) -> list[str]:
        return [row.strip() for row in content.split("\\\\") if row.strip()]

    def _render_matrix(self, content: str, left: str, right: str, *, compact: bool) -> str:
        separator = ", " if compact else "  "
        rows = [
            separator.join(self.parse(cell.strip()) for cell in row.split("&"))
            for row in self._rows(content)
        ]
        body = ("; " if compact else "\n").join(rows)
        return f"{left}{body}{right}"

    def _render_cases(self, content: str) -> str:
        parts: list[str] = []
        for row in self._rows(content):
            value, _, condition = row.partition("&")
            value = self.parse(value.strip())
            condition = self.parse(condition.strip())
            parts.append(f"{value}, {condition}" if condition else value)
        if not parts:
            return ""
        if len(parts) == 1:
            return "⎧ " + parts[0]
        lines = []
        for index, part in enumerate(parts):
            if index == 0:
                lines.append("⎧ " + part)
            elif index == len(parts) - 1:
                lines.append("⎩ " + part)
            else:
                lines.append("⎨ " + part)
        return "\n".join(lines)

    def _render_align(self, content: str) -> str:
        return "\n".join(self.parse(row.replace("&", " ")) for row in self._rows(content))

    def _render_array(self, content: str) -> str:
        stripped = content.strip()
        if stripped.startswith("{"):
            close = stripped.find("}")
            if close != -1:
                content = stripped[close + 1 :]
        return self._render_matrix(content, "", "", compact=False)
