"""Restricted arithmetic interpreter for custom derived-field formulas.

The language is numbers, whitespace, ``+ - * / ( )`` and nothing else.
The tokenizer rejects any other character before parsing starts, so text
that is not entirely arithmetic never reaches evaluation.
"""

import math
import re
from typing import Any, List, NamedTuple, Optional

from formbuilder.exceptions import FormulaError


_NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]*)?|\.[0-9]+")
_NUMERIC_STRING_RE = re.compile(r"^[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")
_OPERATORS = "+-*/()"
_WHITESPACE = " \t\r\n"
_MAX_DEPTH = 100


class Token(NamedTuple):
    kind: str  # "number", "op" or "end"
    text: str
    position: int


def tokenize(formula: str) -> List[Token]:
    """Split a formula into tokens, rejecting anything outside the whitelist."""
    tokens = []
    position = 0
    while position < len(formula):
        char = formula[position]
        if char in _WHITESPACE:
            position += 1
            continue
        if char in _OPERATORS:
            tokens.append(Token("op", char, position))
            position += 1
            continue
        match = _NUMBER_RE.match(formula, position)
        if match:
            tokens.append(Token("number", match.group(), position))
            position = match.end()
            continue
        raise FormulaError(f"Unexpected character {char!r} at position {position}")
    tokens.append(Token("end", "", position))
    return tokens


class _Parser:
    """
    Recursive-descent evaluator over a token list.

    Grammar:
        expression := term (("+" | "-") term)*
        term       := factor (("*" | "/") factor)*
        factor     := ("+" | "-") factor | number | "(" expression ")"
    """

    def __init__(self, tokens: List[Token]):
        self._tokens = tokens
        self._index = 0
        self._depth = 0

    def parse(self) -> float:
        value = self._expression()
        token = self._peek()
        if token.kind != "end":
            raise FormulaError(f"Unexpected {token.text!r} at position {token.position}")
        return value

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _at_operator(self, *operators: str) -> bool:
        token = self._peek()
        return token.kind == "op" and token.text in operators

    def _expression(self) -> float:
        value = self._term()
        while self._at_operator("+", "-"):
            operator = self._advance().text
            right = self._term()
            value = value + right if operator == "+" else value - right
        return value

    def _term(self) -> float:
        value = self._factor()
        while self._at_operator("*", "/"):
            operator = self._advance().text
            right = self._factor()
            if operator == "*":
                value = value * right
            elif right == 0:
                raise FormulaError("Division by zero")
            else:
                value = value / right
        return value

    def _factor(self) -> float:
        self._depth += 1
        if self._depth > _MAX_DEPTH:
            raise FormulaError("Formula is nested too deeply")
        try:
            token = self._peek()
            if self._at_operator("+", "-"):
                self._advance()
                operand = self._factor()
                return -operand if token.text == "-" else operand
            if token.kind == "number":
                self._advance()
                return float(token.text)
            if self._at_operator("("):
                self._advance()
                value = self._expression()
                if not self._at_operator(")"):
                    raise FormulaError(f"Missing ')' at position {self._peek().position}")
                self._advance()
                return value
            if token.kind == "end":
                raise FormulaError("Unexpected end of formula")
            raise FormulaError(f"Unexpected {token.text!r} at position {token.position}")
        finally:
            self._depth -= 1


def evaluate_formula(formula: str) -> float:
    """Evaluate an arithmetic formula; raises FormulaError on any problem."""
    result = _Parser(tokenize(formula)).parse()
    if not math.isfinite(result):
        raise FormulaError("Formula result is not a finite number")
    return result


def to_number(value: Any) -> Optional[float]:
    """Numeric interpretation of a form value, or None when it has none."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        text = value.strip()
        if _NUMERIC_STRING_RE.match(text):
            number = float(text)
            return number if math.isfinite(number) else None
    return None


def format_number(number: float) -> str:
    """Stringify a number, dropping the fractional part of whole values."""
    number = float(number)
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return repr(number)
