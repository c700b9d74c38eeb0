"""Compound formula parser.

Turns a single formula such as ``Fe2(SO4)3`` into a mapping from element
symbol to atom count. The scan is one left-to-right pass over the formula
with an explicit stack holding one parsing frame per parenthesis depth.

Each frame alternates between two modes:

- element mode expects an element symbol. Element symbols are matched
  greedily against the symbol table (longest prefix of length 1-3).
  Digits found here are a leading multiplier, which is not supported
  inside a formula; they are skipped with a warning.
- multiplier mode expects an optional integer count that applies to the
  element or parenthesized group just read (default 1).
"""

from __future__ import annotations

import enum
import logging
import string
from dataclasses import dataclass, field
from typing import Container

from chembalance.errors import EmptyFormula, InvalidElementSymbol, UnbalancedParentheses
from chembalance.models import ElementCount
from chembalance.periodic import ELEMENT_SYMBOLS

logger = logging.getLogger(__name__)

MAX_SYMBOL_LENGTH = 3

# ASCII only; str.isdigit() also accepts superscript digits.
DIGITS = frozenset(string.digits)


class ElementMode(enum.Enum):
    ELEMENT = "element"
    MULTIPLIER = "multiplier"


@dataclass
class _Frame:
    accumulated: ElementCount = field(default_factory=dict)
    pending: ElementCount = field(default_factory=dict)
    mode: ElementMode = ElementMode.ELEMENT

    def flush(self, multiplier: int) -> None:
        """Fold the pending tally into the accumulator and clear it."""
        for symbol, count in self.pending.items():
            self.accumulated[symbol] = self.accumulated.get(symbol, 0) + multiplier * count
        self.pending = {}


def _match_symbol(formula: str, start: int, symbols: Container[str]) -> int:
    length = 0
    for size in range(1, MAX_SYMBOL_LENGTH + 1):
        if start + size <= len(formula) and formula[start : start + size] in symbols:
            length = size
    return length


def _read_digits(formula: str, start: int) -> int:
    end = start
    while end < len(formula) and formula[end] in DIGITS:
        end += 1
    return end


def parse_compound(formula: str, symbols: Container[str] | None = None) -> ElementCount:
    """Parse a compound formula into element counts.

    Args:
        formula: Formula without whitespace or a reaction-level coefficient,
            e.g. ``Mg(OH)2``.
        symbols: Valid element symbols. Defaults to the built-in periodic
            table.

    Returns:
        Element counts keyed by symbol, in the order elements first appear.

    Raises:
        UnbalancedParentheses: Too many or too few closing parentheses.
        InvalidElementSymbol: No symbol matches at some scan position.
        EmptyFormula: The formula contains no atoms.
    """
    if symbols is None:
        symbols = ELEMENT_SYMBOLS

    stack = [_Frame()]
    warned = False
    i = 0
    while i < len(formula):
        char = formula[i]
        frame = stack[-1]

        if char == "(":
            frame.flush(1)
            stack.append(_Frame())
            i += 1
            continue

        if char == ")":
            if len(stack) == 1:
                raise UnbalancedParentheses(formula, too_many=True)
            frame.flush(1)
            if not frame.accumulated:
                raise EmptyFormula(formula)
            stack.pop()
            parent = stack[-1]
            # The group's multiplier, if any, is applied when the parent flushes.
            parent.pending = frame.accumulated
            parent.mode = ElementMode.MULTIPLIER
            i += 1
            continue

        if frame.mode is ElementMode.ELEMENT:
            if char in DIGITS:
                if not warned:
                    logger.warning("Ignoring extra numbers in %s", formula)
                    warned = True
                i = _read_digits(formula, i)
                continue

            length = _match_symbol(formula, i, symbols)
            if length == 0:
                raise InvalidElementSymbol(formula, i)
            frame.pending = {formula[i : i + length]: 1}
            frame.mode = ElementMode.MULTIPLIER
            i += length
            continue

        if char in DIGITS:
            end = _read_digits(formula, i)
            frame.flush(int(formula[i:end]))
            i = end
        else:
            frame.flush(1)
        frame.mode = ElementMode.ELEMENT

    if len(stack) != 1:
        raise UnbalancedParentheses(formula, too_many=False)

    root = stack[0]
    root.flush(1)
    if not root.accumulated:
        raise EmptyFormula(formula)
    return root.accumulated
