import argparse
import asyncio
import logging
import sys
from typing import Iterable, List, Optional

from exprparts.config import DEFAULT_CONFIG_PATH, ExtractionConfig, load_config
from exprparts.errors import ExpressionError
from exprparts.events import LoggingEvents
from exprparts.jobs import ExtractionService
from exprparts.parts import ExpressionPart, to_json
from exprparts.scanner import ExpressionScanner


def show(expression: str, parts: List[ExpressionPart], out=None):
    print(expression, file=out)
    for i, part in enumerate(parts):
        print(f"{i:>3}  {part.type.value:<14} {part.text!r:>20}  [{part.start},{part.end})", file=out)


async def run(expressions: Iterable[str], config: ExtractionConfig, variables_only: bool, as_json: bool, out=None) -> int:
    status = 0
    events = LoggingEvents()
    service = ExtractionService(config, events)
    scanner = ExpressionScanner(config, events)
    for expression in expressions:
        try:
            if variables_only:
                parts = await service.extract_variables(expression)
            else:
                parts = await scanner.scan(expression)
        except ExpressionError as e:
            print(f"error: {e}", file=sys.stderr)
            status = 1
            continue
        if as_json:
            print(to_json(parts), file=out)
        else:
            show(expression, parts, out)
    return status


def read_expressions(args: List[str], stdin=None) -> List[str]:
    if args:
        return args
    return [line.rstrip("\n") for line in (stdin or sys.stdin) if line.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="exprparts", description="Split expressions into parts and find their variables.")
    parser.add_argument("expressions", nargs="*", metavar="EXPR", help="expressions to scan; read from stdin when omitted")
    parser.add_argument("-c", "--config", default=DEFAULT_CONFIG_PATH, help="YAML config file")
    parser.add_argument("--variables", action="store_true", help="report only variable parts")
    parser.add_argument("--json", action="store_true", help="print parts as JSON, one line per expression")
    parser.add_argument("--simulate", action="store_true", help="pause 0.5s per character like a long-running job")
    parser.add_argument("-v", "--verbose", action="store_true", help="log progress")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args.config)
    if args.simulate:
        config = config.model_copy(update={"step_delay": 0.5})
        # progress is logged at DEBUG by LoggingEvents
        logging.getLogger("exprparts.events").setLevel(logging.DEBUG)
    expressions = read_expressions(args.expressions)
    return asyncio.run(run(expressions, config, args.variables, args.json))


if __name__ == "__main__":
    sys.exit(main())
