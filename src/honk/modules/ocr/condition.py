"""
Condition expressions evaluated against extracted text.

Grammar (case-insensitive keywords, ``and`` binds tighter than ``or``)::

    expr    := term (("and" | "or") term)*
    term    := ["not"] predicate
    predicate := "contains" STRING | "equals" STRING | "matches" STRING
               | "empty" | OP NUMBER            OP in > >= < <= == !=

Examples: ``contains "Saved"``, ``not empty and >= 3``, ``matches "^\\d{9}$"``.
Text comparisons ignore case and collapse whitespace; numeric comparisons
parse the first number in the text, tolerating common OCR confusions.
"""
from __future__ import annotations

import operator
import re
import shlex
from typing import Callable, List, Optional

_NUMERIC_OPS = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}

# Letters OCR commonly returns in place of digits
_DIGIT_FIXES = str.maketrans({"O": "0", "o": "0", "l": "1", "I": "1", "S": "5", "B": "8"})

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


class ConditionSyntaxError(ValueError):
    pass


def normalize_text(text: str) -> str:
    return " ".join(text.split()).casefold()


def parse_number(text: str) -> Optional[float]:
    """First number in OCR text, or None.

    Thousands separators and spaces are dropped. If no digit is present at
    all, O/l/I/S/B are read as the digits they are usually confused with.
    """
    cleaned = text.strip().replace(",", "").replace(" ", "")
    m = _NUMBER_RE.search(cleaned)
    if m is None:
        m = _NUMBER_RE.search(cleaned.translate(_DIGIT_FIXES))
    if m is None:
        return None
    return float(m.group(0))


def _tokenize(expr: str) -> List[str]:
    lexer = shlex.shlex(expr, posix=True, punctuation_chars="<>=!")
    lexer.whitespace_split = True
    lexer.commenters = ""
    try:
        return list(lexer)
    except ValueError as e:
        raise ConditionSyntaxError(f"Cannot parse condition {expr!r}: {e}") from e


def _predicate(tokens: List[str], pos: int, expr: str):
    """Parse one term starting at ``pos``; returns (callable, next_pos)."""
    negate = False
    if pos < len(tokens) and tokens[pos].lower() == "not":
        negate = True
        pos += 1
    if pos >= len(tokens):
        raise ConditionSyntaxError(f"Incomplete condition {expr!r}")

    word = tokens[pos]
    key = word.lower()
    check: Callable[[str], bool]

    if key == "empty":
        check = lambda text: not text.strip()  # noqa: E731
        pos += 1
    elif key in ("contains", "equals", "matches"):
        if pos + 1 >= len(tokens):
            raise ConditionSyntaxError(f"{word} needs an argument in {expr!r}")
        arg = tokens[pos + 1]
        if key == "contains":
            needle = normalize_text(arg)
            check = lambda text: needle in normalize_text(text)  # noqa: E731
        elif key == "equals":
            expected = normalize_text(arg)
            check = lambda text: normalize_text(text) == expected  # noqa: E731
        else:
            try:
                pattern = re.compile(arg, re.IGNORECASE)
            except re.error as e:
                raise ConditionSyntaxError(f"Bad pattern {arg!r}: {e}") from e
            check = lambda text: pattern.search(text.strip()) is not None  # noqa: E731
        pos += 2
    elif word in _NUMERIC_OPS:
        if pos + 1 >= len(tokens):
            raise ConditionSyntaxError(f"{word} needs a number in {expr!r}")
        try:
            bound = float(tokens[pos + 1])
        except ValueError:
            raise ConditionSyntaxError(f"{tokens[pos + 1]!r} is not a number") from None
        op = _NUMERIC_OPS[word]

        def check(text: str, op=op, bound=bound) -> bool:
            value = parse_number(text)
            return value is not None and op(value, bound)

        pos += 2
    else:
        raise ConditionSyntaxError(f"Unknown predicate {word!r} in {expr!r}")

    if negate:
        inner = check
        check = lambda text: not inner(text)  # noqa: E731
    return check, pos


def compile_condition(expr: str) -> Callable[[str], bool]:
    """Compile ``expr`` once; the result can be applied to many texts."""
    tokens = _tokenize(expr)
    if not tokens:
        raise ConditionSyntaxError("Empty condition")

    # disjunction of conjunctions
    groups: List[List[Callable[[str], bool]]] = [[]]
    pos = 0
    while True:
        check, pos = _predicate(tokens, pos, expr)
        groups[-1].append(check)
        if pos >= len(tokens):
            break
        joiner = tokens[pos].lower()
        if joiner == "or":
            groups.append([])
        elif joiner != "and":
            raise ConditionSyntaxError(f"Expected 'and'/'or', got {tokens[pos]!r} in {expr!r}")
        pos += 1
        if pos >= len(tokens):
            raise ConditionSyntaxError(f"Dangling {joiner!r} in {expr!r}")

    return lambda text: any(all(c(text) for c in group) for group in groups)


def evaluate(text: str, expr: str) -> bool:
    return compile_condition(expr)(text)


__all__ = [
    "ConditionSyntaxError",
    "normalize_text",
    "parse_number",
    "compile_condition",
    "evaluate",
]
