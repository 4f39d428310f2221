"""Reading JSON files into tokens, and helpers to inspect the tokens."""

from __future__ import annotations

from pathlib import Path

from .jsmn import JsmnError, Token, TokenType, tokenize

__all__ = [
    "JsonFileError",
    "parse_json",
    "json_line",
    "json_name",
    "json_len",
    "json_streq",
]


class JsonFileError(Exception):
    """A JSON file could not be read or tokenized."""


_TYPE_NAMES = {
    TokenType.PRIMITIVE: "primitive",
    TokenType.ARRAY: "array",
    TokenType.OBJECT: "object",
    TokenType.STRING: "string",
}

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def parse_json(path: str | Path) -> tuple[str, list[Token]]:
    """Read and tokenize the JSON file at ``path``.

    Returns the file's text and its tokens. The number of tokens is
    limited to the file's size in bytes.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise JsonFileError(f"{path}: {exc.strerror or exc}") from exc
    text = data.decode("utf-8", errors="surrogateescape")
    try:
        tokens = tokenize(text, len(data))
    except JsmnError as exc:
        raise JsonFileError(f"{path}: json error {exc.code}: {exc}") from exc
    return text, tokens


def json_line(text: str, token: Token) -> int:
    """Return the 1-based line number on which ``token`` starts."""
    return text.count("\n", 0, max(token.start, 0)) + 1


def json_name(token: Token) -> str:
    """Return the name of the token's type, or '?' if unknown."""
    return _TYPE_NAMES.get(token.type, "?")


def json_len(token: Token) -> int:
    """Return the length of the token's span."""
    return token.end - token.start


def json_streq(text: str, token: Token, s: str) -> bool:
    """Tell whether the token's text equals ``s``, ignoring ASCII case."""
    if json_len(token) != len(s):
        return False
    value = text[token.start:token.end]
    return value.translate(_ASCII_LOWER) == s.translate(_ASCII_LOWER)