"""A minimal, non-strict JSON tokenizer.

The tokenizer does not build values. It splits the text into tokens that
record their type, their span in the text and, for objects and arrays,
the number of direct children. Keys and values of an object are both
counted as children.

Any unquoted run of characters is accepted as a primitive, and ':' ends
a primitive.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

__all__ = [
    "TokenType",
    "Token",
    "JsmnError",
    "NotEnoughTokens",
    "InvalidJson",
    "PartialJson",
    "tokenize",
]


class TokenType(enum.IntEnum):
    """Kind of a JSON token."""

    PRIMITIVE = 0
    OBJECT = 1
    ARRAY = 2
    STRING = 3


@dataclass
class Token:
    """A span of the source text.

    For strings the span excludes the quotes. For objects and arrays it
    includes the brackets; ``end`` stays -1 while the container is open.
    """

    type: TokenType
    start: int = -1
    end: int = -1
    size: int = 0


class JsmnError(ValueError):
    """Base class of tokenizer errors."""

    code = 0


class NotEnoughTokens(JsmnError):
    """More tokens were needed than allowed."""

    code = -1


class InvalidJson(JsmnError):
    """An invalid character or an unmatched bracket was found."""

    code = -2


class PartialJson(JsmnError):
    """The text ended before the JSON document was complete."""

    code = -3


_PRIMITIVE_END = frozenset(":\t\r\n ,]}")
_WHITESPACE = frozenset("\t\r\n:, ")
_ESCAPES = frozenset('"/\\bfrntu')


class _Parser:
    def __init__(self, text: str, max_tokens: int | None) -> None:
        self.text = text
        self.max_tokens = max_tokens
        self.tokens: list[Token] = []
        self.pos = 0
        self.toksuper = -1

    def _alloc(self) -> Token:
        if self.max_tokens is not None and len(self.tokens) >= self.max_tokens:
            raise NotEnoughTokens(
                f"more than {self.max_tokens} tokens needed at offset {self.pos}"
            )
        token = Token(TokenType.PRIMITIVE)
        self.tokens.append(token)
        return token

    def _count_child(self) -> None:
        if self.toksuper != -1:
            self.tokens[self.toksuper].size += 1

    def _primitive(self) -> None:
        text = self.text
        start = self.pos
        end = len(text)
        for pos in range(start, len(text)):
            c = text[pos]
            if c in _PRIMITIVE_END:
                end = pos
                break
            if not 32 <= ord(c) < 127:
                raise InvalidJson(f"invalid character {c!r} at offset {pos}")
        token = self._alloc()
        token.type, token.start, token.end = TokenType.PRIMITIVE, start, end
        self.pos = end - 1

    def _string(self) -> None:
        text = self.text
        start = self.pos
        pos = start + 1
        while pos < len(text):
            c = text[pos]
            if c == '"':
                token = self._alloc()
                token.type, token.start, token.end = TokenType.STRING, start + 1, pos
                self.pos = pos
                return
            if c == "\\":
                pos += 1
                if pos >= len(text):
                    break
                if text[pos] not in _ESCAPES:
                    raise InvalidJson(
                        f"invalid escape {text[pos]!r} at offset {pos}"
                    )
            pos += 1
        raise PartialJson(f"unterminated string starting at offset {start}")

    def _close(self, kind: TokenType) -> None:
        open_index = self._last_open(len(self.tokens) - 1)
        if open_index is None:
            raise InvalidJson(f"unmatched closing bracket at offset {self.pos}")
        token = self.tokens[open_index]
        if token.type != kind:
            raise InvalidJson(f"mismatched closing bracket at offset {self.pos}")
        token.end = self.pos + 1
        parent = self._last_open(open_index)
        self.toksuper = -1 if parent is None else parent

    def _last_open(self, below: int) -> int | None:
        for index in range(below, -1, -1):
            token = self.tokens[index]
            if token.start != -1 and token.end == -1:
                return index
        return None

    def run(self) -> list[Token]:
        text = self.text
        while self.pos < len(text):
            c = text[self.pos]
            if c in "{[":
                token = self._alloc()
                self._count_child()
                token.type = TokenType.OBJECT if c == "{" else TokenType.ARRAY
                token.start = self.pos
                self.toksuper = len(self.tokens) - 1
            elif c in "}]":
                self._close(TokenType.OBJECT if c == "}" else TokenType.ARRAY)
            elif c == '"':
                self._string()
                self._count_child()
            elif c in _WHITESPACE:
                pass
            else:
                self._primitive()
                self._count_child()
            self.pos += 1

        if self._last_open(len(self.tokens) - 1) is not None:
            raise PartialJson("unclosed object or array at end of input")
        return self.tokens


def tokenize(text: str, max_tokens: int | None = None) -> list[Token]:
    """Split ``text`` into JSON tokens in document order.

    ``max_tokens`` bounds the number of tokens; ``None`` means no bound.
    Raises a :class:`JsmnError` subclass when the text cannot be tokenized.
    """
    return _Parser(text, max_tokens).run()