from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, List, Sequence, TextIO

from calculator_app.services.calculator import CalculatorError, CalculatorService

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger("evaluate_expressions")

ERROR_TEXT = "Error"


def evaluate_all(service: CalculatorService, expressions: Iterable[str]) -> tuple[List[str], int]:
    """Evaluate each expression, returning the printable lines and the failure count."""
    lines: list[str] = []
    failures = 0
    for expression in expressions:
        expression = expression.strip()
        if not expression:
            continue
        try:
            display = service.evaluate(expression).display
        except CalculatorError as exc:
            logger.debug("Failed to evaluate %s: %s", expression, exc.message)
            display = ERROR_TEXT
            failures += 1
        lines.append(f"{expression} = {display}")
    return lines, failures


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Evaluate calculator expressions (+ - * / ** sqrt( ) and print the display value."
    )
    parser.add_argument(
        "expressions",
        nargs="*",
        help="Expressions to evaluate. Reads one expression per line from stdin when omitted.",
    )
    parser.add_argument(
        "--max-length",
        type=int,
        default=None,
        help="Override the maximum accepted expression length.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log the reason for each failed evaluation.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logger.setLevel(logging.DEBUG)

    service = CalculatorService.from_settings()
    if args.max_length is not None:
        service.max_expression_length = args.max_length

    expressions: Iterable[str] = args.expressions or (stdin or sys.stdin)
    lines, failures = evaluate_all(service, expressions)

    out = stdout or sys.stdout
    for line in lines:
        out.write(line + "\n")

    if failures:
        logger.info("%d of %d expressions failed", failures, len(lines))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
