import asyncio
import logging
from decimal import Decimal
from typing import List, Optional

from exprparts.builder import ExpressionPartBuilder
from exprparts.config import ExtractionConfig
from exprparts.errors import ExpressionTooDeepError, MalformedExpressionError
from exprparts.events import ExpressionEvents, NullEvents
from exprparts.parts import ExpressionPart

logger = logging.getLogger(__name__)

OPEN = "("
CLOSE = ")"


def is_word_char(ch: str, quote_char: str = '"') -> bool:
    return ch == quote_char or ch == "." or ch == "_" or ch.isdecimal() or ch.isalpha()


def find_closing(text: str, open_index: int, nested: bool = True) -> int:
    """Index of the ")" closing the "(" at ``open_index``, or -1 when there is none.

    With ``nested`` false the first ")" after the "(" is taken, whatever lies
    in between.
    """
    if not nested:
        return text.find(CLOSE, open_index)

    depth = 0
    for index in range(open_index, len(text)):
        if text[index] == OPEN:
            depth += 1
        elif text[index] == CLOSE:
            depth -= 1
            if depth == 0:
                return index
    return -1


def percent_of(index: int, expression: str) -> Decimal:
    if not expression:
        return Decimal(100)
    return Decimal(100) * index / len(expression)


class ExpressionScanner:
    """Splits an expression into classified parts in a single left to right pass.

    Each parenthesized group is scanned by a recursive call over the text
    between the parentheses, and its parts are spliced in where the group
    occurs. Every character step ends with ``await asyncio.sleep(step_delay)``
    so a scan can be observed or cancelled between characters. Only the
    top-level scan reports progress.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None, events: Optional[ExpressionEvents] = None):
        self.config = config or ExtractionConfig()
        self.events = events or NullEvents()

    async def scan(self, expression: str) -> List[ExpressionPart]:
        logger.debug("Scanning %r", expression)
        if not expression:
            self.events.progress_updated(expression, percent_of(0, expression))
            return []

        self.events.progress_updated(expression, percent_of(0, expression))
        parts = await self._scan(expression, expression, 0, 0)
        self.events.progress_updated(expression, percent_of(len(expression), expression))
        logger.debug("Scanned %r into %d parts", expression, len(parts))
        return parts

    async def extract_variables(self, expression: str) -> List[ExpressionPart]:
        parts = await self.scan(expression)
        return [part for part in parts if part.is_variable]

    async def _scan(self, expression: str, text: str, base: int, depth: int) -> List[ExpressionPart]:
        # base is the absolute offset of text[0] inside expression
        builder = ExpressionPartBuilder(self.config.quote_char)
        nested = self.config.paren_matching == "nested"
        result: List[ExpressionPart] = []
        current_index = 0
        end = len(text)

        while current_index != end:
            step_index = current_index
            ch = text[current_index]

            if ch == OPEN:
                close_index = find_closing(text, current_index, nested)
                if close_index < 0:
                    raise MalformedExpressionError(expression, base + current_index)
                if depth + 1 > self.config.max_depth:
                    raise ExpressionTooDeepError(expression, base + current_index, self.config.max_depth)

                # a group with no name in front of it is plain grouping
                if builder.has_value():
                    result.append(builder.build_function(base + current_index))
                inner = text[current_index + 1:close_index]
                result.extend(await self._scan(expression, inner, base + current_index + 1, depth + 1))
                current_index = close_index + 1

            elif is_word_char(ch, self.config.quote_char):
                builder.append(ch)
                current_index += 1

            else:
                if builder.has_value():
                    result.append(builder.build(base + current_index))
                current_index += 1

            await asyncio.sleep(self.config.step_delay)

            if depth == 0:
                self.events.progress_updated(expression, percent_of(step_index, expression))

        if builder.has_value():
            result.append(builder.build(base + end))
        return result


def _immediate(config: Optional[ExtractionConfig]) -> ExtractionConfig:
    config = config or ExtractionConfig()
    return config.model_copy(update={"step_delay": 0.0})


def tokenize(expression: str, config: Optional[ExtractionConfig] = None) -> List[ExpressionPart]:
    """Scan ``expression`` without pausing between characters.

    Runs its own event loop, so it cannot be called from inside a coroutine;
    use ``ExpressionScanner.scan`` there.
    """
    return asyncio.run(ExpressionScanner(_immediate(config)).scan(expression))


def variables(expression: str, config: Optional[ExtractionConfig] = None) -> List[ExpressionPart]:
    return asyncio.run(ExpressionScanner(_immediate(config)).extract_variables(expression))
