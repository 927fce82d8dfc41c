import asyncio
from decimal import Decimal

import pytest

from exprparts.config import ExtractionConfig
from exprparts.errors import MalformedExpressionError
from exprparts.events import CallbackEvents
from exprparts.scanner import ExpressionScanner, percent_of


def _recording_scanner(**config):
    seen = []
    events = CallbackEvents(on_progress=lambda expression, percent: seen.append((expression, percent)))
    return ExpressionScanner(ExtractionConfig(**config), events), seen


@pytest.mark.asyncio
async def test_empty_expression_reports_once_at_100():
    scanner, seen = _recording_scanner()
    assert await scanner.scan("") == []
    assert seen == [("", Decimal(100))]


@pytest.mark.asyncio
async def test_progress_per_character():
    scanner, seen = _recording_scanner()
    await scanner.scan("x+y")
    percents = [p for _, p in seen]
    assert percents == [Decimal(0), Decimal(0), percent_of(1, "x+y"), percent_of(2, "x+y"), Decimal(100)]
    assert all(expression == "x+y" for expression, _ in seen)


@pytest.mark.asyncio
async def test_inner_groups_do_not_report_progress():
    scanner, seen = _recording_scanner()
    await scanner.scan("f(x)")
    # f, then the whole group as one step
    assert [p for _, p in seen] == [Decimal(0), Decimal(0), Decimal(25), Decimal(100)]


@pytest.mark.asyncio
@pytest.mark.parametrize("expression", ["a", "max(a, min(b, 3)) / (c + d)", 'f("x") + 12.5'])
async def test_progress_is_non_decreasing_from_0_to_100(expression):
    scanner, seen = _recording_scanner()
    await scanner.scan(expression)
    percents = [p for _, p in seen]
    assert percents[0] == 0
    assert percents[-1] == 100
    assert percents == sorted(percents)
    assert all(0 <= p <= 100 for p in percents)


@pytest.mark.asyncio
async def test_malformed_expression_stops_progress():
    scanner, seen = _recording_scanner()
    with pytest.raises(MalformedExpressionError):
        await scanner.scan("ab + f(x")
    assert Decimal(100) not in [p for _, p in seen]


@pytest.mark.asyncio
async def test_scan_can_be_cancelled_between_characters():
    scanner, seen = _recording_scanner(step_delay=0.01)
    task = asyncio.create_task(scanner.scan("alpha + beta * gamma"))
    while len(seen) < 3:
        await asyncio.sleep(0.005)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert seen[-1][1] < 100


@pytest.mark.asyncio
async def test_extract_variables():
    scanner, _ = _recording_scanner()
    found = await scanner.extract_variables("f(x) + 2 * y")
    assert [(v.text, v.start, v.end) for v in found] == [("x", 2, 3), ("y", 11, 12)]
