import logging
from typing import List

import sly

from exprparts.errors import InvalidBuilderStateError
from exprparts.parts import ExpressionPart, PartType

logger = logging.getLogger(__name__)

DEFAULT_QUOTE = '"'


class WordLexer(sly.Lexer):
    tokens = {NUMBER, NAME, OTHER} # type: ignore
    NUMBER = r"\d+(?:\.\d*)?|\.\d+"
    NAME = r"[^\W\d]\w*"
    OTHER = r"\S"

    def error(self, t):
        logger.debug("Illegal character %r in word", t.value[0])
        self.index += 1


_lexer = WordLexer()


def is_number(text: str) -> bool:
    """True when a single NUMBER lexeme covers the whole of ``text``."""
    lexemes = list(_lexer.tokenize(text))
    return len(lexemes) == 1 and lexemes[0].type == "NUMBER" and lexemes[0].value == text


class ExpressionPartBuilder:
    """Accumulates consecutive word characters of one scan level."""

    def __init__(self, quote_char: str = DEFAULT_QUOTE):
        self.quote_char = quote_char
        self.buffer: List[str] = []

    def append(self, ch: str):
        self.buffer.append(ch)

    def has_value(self) -> bool:
        return len(self.buffer) > 0

    def classify(self, text: str) -> PartType:
        if text[0] == self.quote_char:
            return PartType.STRING_LITERAL
        if is_number(text):
            return PartType.NUMBER_LITERAL
        return PartType.VARIABLE

    def build(self, end_offset: int) -> ExpressionPart:
        text = self._drain("build")
        return ExpressionPart(self.classify(text), end_offset - len(text), end_offset, text)

    def build_function(self, offset: int) -> ExpressionPart:
        text = self._drain("build_function")
        return ExpressionPart(PartType.FUNCTION, offset - len(text), offset, text)

    def _drain(self, operation: str) -> str:
        if not self.buffer:
            raise InvalidBuilderStateError(f"{operation}() called with nothing accumulated")
        text = "".join(self.buffer)
        self.buffer.clear()
        return text

    def __repr__(self):
        return f"ExpressionPartBuilder({''.join(self.buffer)!r})"
