"""
Arithmetic evaluator: an ordered table of expression templates.

Each rule is tried in order against the normalised text; the first
structural match wins and no other rule is tried afterwards.
"""

import math
import re
from typing import Callable, List, NamedTuple, Optional, Tuple

from . import config
from .reasoning import PathwayResult
from .router import MATHEMATICAL

_NUM = r'(\d+(?:\.\d+)?)'
_SIGNED = r'(-?\d+(?:\.\d+)?)'
_ADD = r'\+'
_SUB = r'-'
_MUL = r'[×*x]'
_DIV = r'[÷/]'
# A template may not start in the middle of a longer expression
_START = r'(?<![\d.+\-×*÷/^])(?<!\dx)'


class UndefinedOperation(ArithmeticError):
    """Raised by an evaluator when the matched operation has no defined result"""


class Calculation(NamedTuple):
    answer: float
    steps: List[str]
    method: str


class ArithmeticRule(NamedTuple):
    name: str
    pattern: 're.Pattern'
    evaluator: Callable[..., Calculation]


def format_number(val: float) -> str:
    """Format number: drop unnecessary trailing decimals."""
    if isinstance(val, float) and not math.isfinite(val):
        return str(val)
    if isinstance(val, float) and val == int(val) and abs(val) < 1e15:
        return str(int(val))
    if isinstance(val, float):
        return f"{val:.10g}"
    return str(val)


def _n(text: str):
    """Whole numbers stay exact ints; decimals become floats"""
    if '.' not in text:
        return int(text)
    value = float(text)
    if not math.isfinite(value):
        raise UndefinedOperation(f"Number too large: {text[:20]}…")
    return int(value) if value.is_integer() else value


def _divide(a, b):
    if b == 0:
        raise UndefinedOperation("Division by zero is undefined")
    if isinstance(a, int) and isinstance(b, int) and a % b == 0:
        return a // b
    result = a / b
    return int(result) if result == int(result) else result


def _f(val) -> str:
    return format_number(float(val)) if isinstance(val, float) else str(val)


# ── Evaluators ──────────────────────────────────────────────────────────────

def _ternary_add(a, b, c) -> Calculation:
    ab = a + b
    return Calculation(ab + c, [f"{_f(a)} + {_f(b)} = {_f(ab)}", f"{_f(ab)} + {_f(c)} = {_f(ab + c)}"],
                       "Sequential addition")


def _ternary_multiply(a, b, c) -> Calculation:
    ab = a * b
    return Calculation(ab * c, [f"{_f(a)} × {_f(b)} = {_f(ab)}", f"{_f(ab)} × {_f(c)} = {_f(ab * c)}"],
                       "Sequential multiplication")


def _multiply_then_add(a, b, c) -> Calculation:
    ab = a * b
    return Calculation(ab + c, [f"{_f(a)} × {_f(b)} = {_f(ab)}", f"{_f(ab)} + {_f(c)} = {_f(ab + c)}"],
                       "Order of operations (multiplication first)")


def _add_then_multiply(a, b, c) -> Calculation:
    bc = b * c
    return Calculation(a + bc, [f"{_f(b)} × {_f(c)} = {_f(bc)}", f"{_f(a)} + {_f(bc)} = {_f(a + bc)}"],
                       "Order of operations (multiplication first)")


def _add(a, b) -> Calculation:
    return Calculation(a + b, [f"{_f(a)} + {_f(b)} = {_f(a + b)}"], "Basic addition")


def _subtract(a, b) -> Calculation:
    return Calculation(a - b, [f"{_f(a)} - {_f(b)} = {_f(a - b)}"], "Basic subtraction")


def _multiply(a, b) -> Calculation:
    return Calculation(a * b, [f"{_f(a)} × {_f(b)} = {_f(a * b)}"], "Basic multiplication")


def _div(a, b) -> Calculation:
    result = _divide(a, b)
    return Calculation(result, [f"{_f(a)} ÷ {_f(b)} = {_f(result)}"], "Basic division")


def _percent_of(p, base) -> Calculation:
    result = _divide(p * base, 100)
    return Calculation(result, [f"{_f(p)}% = {_f(p)} ÷ 100", f"{_f(p)} ÷ 100 × {_f(base)} = {_f(result)}"],
                       "Percentage")


def _power(base, exponent) -> Calculation:
    if base == 0 and exponent < 0:
        raise UndefinedOperation("Zero cannot be raised to a negative power")
    if abs(exponent) > 1000:
        raise UndefinedOperation("Exponent too large")
    result = base ** exponent
    return Calculation(result, [f"{_f(base)} ^ {_f(exponent)} = {_f(result)}"], "Exponentiation")


def _square_root(n) -> Calculation:
    root = math.sqrt(n)
    root = int(root) if root == int(root) else root
    return Calculation(root, [f"√{_f(n)} = {_f(root)}"], "Square root")


def _factorial(n) -> Calculation:
    if not isinstance(n, int):
        raise UndefinedOperation("Factorial is only defined for whole numbers")
    if n > 170:
        raise UndefinedOperation("Factorial too large")
    result = math.factorial(n)
    return Calculation(result, [f"{n}! = {' × '.join(str(i) for i in range(n, 0, -1)) or '1'} = {result}"],
                       "Factorial")


def _rule(name: str, expression: str, evaluator) -> ArithmeticRule:
    return ArithmeticRule(name, re.compile(_START + expression + r'$'), evaluator)


# Most specific first
RULES: Tuple[ArithmeticRule, ...] = (
    _rule("Triple Addition", f"{_SIGNED}{_ADD}{_NUM}{_ADD}{_NUM}", _ternary_add),
    _rule("Triple Multiplication", f"{_SIGNED}{_MUL}{_NUM}{_MUL}{_NUM}", _ternary_multiply),
    _rule("Multiplication then Addition", f"{_SIGNED}{_MUL}{_NUM}{_ADD}{_NUM}", _multiply_then_add),
    _rule("Addition then Multiplication", f"{_SIGNED}{_ADD}{_NUM}{_MUL}{_NUM}", _add_then_multiply),
    _rule("Simple Addition", f"{_SIGNED}{_ADD}{_NUM}", _add),
    _rule("Simple Subtraction", f"{_SIGNED}{_SUB}{_NUM}", _subtract),
    _rule("Simple Multiplication", f"{_SIGNED}{_MUL}{_NUM}", _multiply),
    _rule("Simple Division", f"{_SIGNED}{_DIV}{_NUM}", _div),
    _rule("Percentage", f"{_NUM}(?:%|percent)of{_NUM}", _percent_of),
    _rule("Power", f"{_NUM}(?:\\^|\\*\\*|tothepowerof){_NUM}", _power),
    _rule("Square Root", f"(?:√|sqrt|squarerootof|squareroot){_NUM}", _square_root),
    _rule("Factorial", f"{_NUM}!", _factorial),
)


def normalize_expression(text: str) -> str:
    """Remove whitespace, lower-case, drop trailing punctuation and '='"""
    cleaned = re.sub(r'\s+', '', str(text or '')).lower()
    return re.sub(r'[?.=]+$', '', cleaned)


def match_rule(text: str) -> Optional[Tuple[ArithmeticRule, 're.Match']]:
    """Return the first rule whose template matches, with its match object"""
    for rule in RULES:
        m = rule.pattern.search(text)
        if m:
            return rule, m
    return None


def evaluate(raw_text: str) -> PathwayResult:
    """
    Evaluate an arithmetic request. Never raises.

    ``data`` is None unless a template matched and produced a value.
    """
    trace = [f"Mathematical input to analyze: \"{raw_text}\""]
    cleaned = normalize_expression(raw_text)
    trace.append(f"Cleaned input: \"{cleaned}\"")

    found = match_rule(cleaned)
    if found is None and cleaned.endswith("!"):
        # "2+2!" is an exclamation, not a factorial
        cleaned = cleaned.rstrip("!")
        found = match_rule(cleaned)
    if found is None:
        trace.append(f"No mathematical pattern recognized in \"{cleaned}\"")
        return PathwayResult(MATHEMATICAL, config.ARITHMETIC_NO_MATCH_CONFIDENCE, None, trace)

    rule, match = found
    expression = match.group(0)
    try:
        operands = tuple(_n(g) for g in match.groups())
        trace.append(f"Pattern \"{rule.name}\" matched with operands {', '.join(_f(o) for o in operands)}")
        calculation = rule.evaluator(*operands)
        if isinstance(calculation.answer, float) and not math.isfinite(calculation.answer):
            raise UndefinedOperation("Result is too large to represent")
    except (ArithmeticError, ValueError) as e:
        trace.append(f"Calculation failed: {e}")
        return PathwayResult(MATHEMATICAL, config.ARITHMETIC_FAILURE_CONFIDENCE, None, trace)

    trace.extend(f"Step {i}: {step}" for i, step in enumerate(calculation.steps, 1))
    trace.append(f"Final result: {_f(calculation.answer)}")
    data = {
        "answer": calculation.answer,
        "steps": list(calculation.steps),
        "method": calculation.method,
        "expression": expression,
    }
    return PathwayResult(MATHEMATICAL, config.ARITHMETIC_MATCH_CONFIDENCE, data, trace)
