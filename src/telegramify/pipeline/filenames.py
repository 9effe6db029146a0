from __future__ import annotations

import re
from typing import Final

DEFAULT_EXTENSION: Final = "txt"
DEFAULT_STEM: Final = "readable"
MAX_KEPT_FILENAME_LENGTH: Final = 24

LANGUAGE_EXTENSIONS: Final[dict[str, str]] = {
    "python": "py",
    "javascript": "js",
    "typescript": "ts",
    "java": "java",
    "c++": "cpp",
    "c": "c",
    "html": "html",
    "css": "css",
    "bash": "sh",
    "shell": "sh",
    "php": "php",
    "markdown": "md",
    "dotenv": "env",
    "json": "json",
    "yaml": "yaml",
    "xml": "xml",
    "dockerfile": "dockerfile",
    "plaintext": "txt",
    "toml": "toml",
    "go": "go",
    "ruby": "rb",
    "rust": "rs",
    "perl": "pl",
    "swift": "swift",
    "kotlin": "kt",
    "sql": "sql",
    "jsx": "jsx",
    "tsx": "tsx",
    "graphql": "graphql",
    "r": "r",
    "dart": "dart",
    "scala": "scala",
    "groovy": "groovy",
}

_FILENAME_RE = re.compile(r"[a-zA-Z0-9_\-\.]+\.[a-zA-Z0-9]+")


def get_ext(language: str) -> str:
    return LANGUAGE_EXTENSIONS.get(language.lower(), DEFAULT_EXTENSION)


def extract_filename(sample: str) -> str:
    match = _FILENAME_RE.search(sample)
    return match.group(0) if match else ""


def infer_filename(code: str, language: str) -> str:
    """Guess a file name for extracted code.

    A ``name.ext`` token in the first two lines wins; it is kept as-is when it
    already carries the language's extension and is short, otherwise the
    extension is appended. Without a token the name is ``readable.<ext>``.
    """
    lines = code.strip().split("\n")[:2]
    sample = "\n".join(lines).replace("\\", "")
    ext = get_ext(language)
    token = extract_filename(sample)
    if not token:
        return f"{DEFAULT_STEM}.{ext}"
    if token.endswith(f".{ext}") and len(token) <= MAX_KEPT_FILENAME_LENGTH:
        return token
    return f"{token}.{ext}"
