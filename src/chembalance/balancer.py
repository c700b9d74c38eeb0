"""Exact-rational balancing of stoichiometric matrices.

The matrix is reduced with Gauss-Jordan elimination over ``Fraction`` cells
held in a numpy object array. A balanceable reaction leaves exactly one free
variable (the last compound), which is fixed at 1; the remaining
coefficients are read off the last column and scaled to the smallest
positive integers.
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from functools import reduce
from typing import Container, Sequence

import numpy as np

from chembalance.errors import Contradiction, NotBalanceable, Underdetermined, Unsolvable
from chembalance.models import BalancedReaction, StoichiometricMatrix
from chembalance.reaction import parse_reaction

logger = logging.getLogger(__name__)


def fraction_gcd(a: Fraction, b: Fraction) -> Fraction:
    """Greatest common divisor of two rationals: gcd(numerators) / lcm(denominators)."""
    a, b = Fraction(a), Fraction(b)
    return Fraction(
        math.gcd(a.numerator, b.numerator),
        math.lcm(a.denominator, b.denominator),
    )


def _eliminate(cells: np.ndarray) -> np.ndarray:
    rows, cols = cells.shape
    m = cells.copy()

    for i in range(cols - 1):
        # Exact arithmetic: the first nonzero entry is as good a pivot as any.
        candidates = np.flatnonzero(m[i:, i] != 0)
        if candidates.size == 0:
            raise Unsolvable(column=i)
        j = i + int(candidates[0])
        if j != i:
            m[[i, j]] = m[[j, i]]

        m[i] = m[i] / m[i, i]
        for k in range(i + 1, rows):
            if m[k, i] != 0:
                m[k] = m[k] - m[k, i] * m[i]

    for i in range(cols - 2, -1, -1):
        for k in range(i - 1, -1, -1):
            if m[k, i] != 0:
                m[k] = m[k] - m[k, i] * m[i]

    return m


def solve_coefficients(matrix: StoichiometricMatrix, compounds: Sequence[str] | None = None) -> tuple[int, ...]:
    """Solve for the minimal positive integer coefficients of each compound.

    Args:
        matrix: Stoichiometric matrix with product entries negated.
        compounds: Compound labels, used only in diagnostics.

    Returns:
        One coefficient per matrix column, with no common factor.

    Raises:
        Underdetermined: Fewer element equations than needed.
        Unsolvable: A pivot column has no nonzero entry left.
        Contradiction: A surplus equation is not satisfied by the solution.
        NotBalanceable: Some compound ends up with a zero or negative coefficient.
    """
    rows, cols = matrix.shape
    if cols - 1 > rows:
        raise Underdetermined(equations=rows, compounds=cols)

    reduced = _eliminate(matrix.cells)

    # The last compound is the free variable, fixed at 1.
    coefficients = np.empty(cols, dtype=object)
    coefficients[: cols - 1] = -reduced[: cols - 1, cols - 1]
    coefficients[cols - 1] = Fraction(1)

    for k in range(cols - 1, rows):
        residue = sum((reduced[k] * coefficients).tolist(), Fraction(0))
        if residue != 0:
            raise Contradiction(row=k)

    divisor = reduce(fraction_gcd, coefficients.tolist(), Fraction(0))
    normalized = [value / divisor for value in coefficients.tolist()]
    logger.debug("Normalized coefficients by %s: %s", divisor, normalized)

    for index, value in enumerate(normalized):
        if value <= 0:
            label = compounds[index] if compounds is not None else f"compound {index + 1}"
            raise NotBalanceable(label)

    return tuple(int(value) for value in normalized)


def balance(matrix: StoichiometricMatrix, lhs: Sequence[str], rhs: Sequence[str]) -> str:
    """Balance a parsed reaction and render it, e.g. ``2H2 + O2 -> 2H2O``."""
    coefficients = solve_coefficients(matrix, tuple(lhs) + tuple(rhs))
    return BalancedReaction(lhs=tuple(lhs), rhs=tuple(rhs), coefficients=coefficients).render()


def balance_reaction(text: str, symbols: Container[str] | None = None) -> BalancedReaction:
    """Parse and balance a reaction string in one step."""
    parsed = parse_reaction(text, symbols)
    coefficients = solve_coefficients(parsed.matrix, parsed.compounds)
    return BalancedReaction(lhs=parsed.lhs, rhs=parsed.rhs, coefficients=coefficients)
