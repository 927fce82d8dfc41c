from typing import Optional


class ExpressionError(Exception):
    pass


class MalformedExpressionError(ExpressionError, ValueError):
    """Raised when an opening parenthesis has no closing one."""

    def __init__(self, expression: str, offset: Optional[int] = None, message: Optional[str] = None):
        self.expression = expression
        self.offset = offset
        if message is None:
            message = f"No closing parenthesis for '(' at offset {offset} in {expression!r}"
        super().__init__(message)


class ExpressionTooDeepError(MalformedExpressionError):
    def __init__(self, expression: str, offset: int, max_depth: int):
        self.max_depth = max_depth
        super().__init__(
            expression,
            offset,
            f"Parentheses nested deeper than {max_depth} at offset {offset} in {expression!r}",
        )


class InvalidBuilderStateError(ExpressionError, RuntimeError):
    pass
