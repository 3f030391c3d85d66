"""
Price expression evaluation ("7.48/2", "(10+5)*2") for SplitBill price fields
"""
from __future__ import annotations
import ast
import logging
import math
import re
from decimal import Decimal

from utils import from_cents, parse_amount, round_half_up

logger = logging.getLogger(__name__)

_ARITHMETIC_ONLY = re.compile(r"[0-9+\-*/().\s]+")
_LEADING_ZEROS = re.compile(r"(?<![\d.])0+(?=\d)")

_BINARY_OPS = {
    ast.Add: lambda a, b: a + b,
    ast.Sub: lambda a, b: a - b,
    ast.Mult: lambda a, b: a * b,
    ast.Div: lambda a, b: a / b,
}
_UNARY_OPS = {
    ast.UAdd: lambda a: a,
    ast.USub: lambda a: -a,
}


class UnsupportedExpression(ValueError):
    """Expression uses something other than + - * / and parentheses"""


def _evaluate_node(node: ast.AST, source: str) -> Decimal:
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        # re-read the literal text so "7.48" stays exact
        return Decimal(ast.get_source_segment(source, node))
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left = _evaluate_node(node.left, source)
        right = _evaluate_node(node.right, source)
        return _BINARY_OPS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_evaluate_node(node.operand, source))
    raise UnsupportedExpression(type(node).__name__)


def evaluate_arithmetic(expression: str) -> Decimal:
    """
    Evaluate a plain arithmetic expression with Decimal math.
    Raises SyntaxError, UnsupportedExpression or ArithmeticError.
    """
    # "02" is not a valid Python literal
    expression = _LEADING_ZEROS.sub("", expression)
    tree = ast.parse(expression, mode="eval")
    return _evaluate_node(tree.body, expression)


def evaluate_price(text: str) -> float:
    """
    Evaluate a price field.

    Input that is not purely digits, operators, parentheses and whitespace is
    never evaluated; it is read as a number prefix instead ("10 + alert(1)"
    gives 10). Results are rounded to the cent. Never raises: anything that
    cannot be read gives 0.
    """
    text = "" if text is None else str(text)
    expression = text.strip()
    if not _ARITHMETIC_ONLY.fullmatch(expression):
        return parse_amount(text)

    try:
        value = evaluate_arithmetic(expression)
        cents = round_half_up(value * 100)
    except (SyntaxError, UnsupportedExpression, ArithmeticError, RecursionError) as ex:
        logger.debug("could not evaluate price %r: %s", text, ex)
        return parse_amount(text)

    result = from_cents(cents)
    if not math.isfinite(result):
        logger.debug("price %r is out of range", text)
        return parse_amount(text)
    return result
