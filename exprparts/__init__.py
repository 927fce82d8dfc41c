from exprparts.errors import ExpressionError, ExpressionTooDeepError, InvalidBuilderStateError, MalformedExpressionError
from exprparts.parts import ExpressionPart, PartType
from exprparts.scanner import ExpressionScanner, tokenize, variables
from exprparts.jobs import ExtractionJob, ExtractionService

__version__ = "0.1.0"
