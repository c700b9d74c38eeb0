"""Data structures for parsed and balanced reactions."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, Sequence

import numpy as np

ElementCount = Dict[str, int]


@dataclass(frozen=True, eq=False)
class StoichiometricMatrix:
    """Element-by-compound coefficient matrix.

    Attributes:
        elements: Element symbols in first-seen order, one per row.
        cells: Object array of ``Fraction`` with shape (elements, compounds).
            Reactant columns come first; product entries are negated.
    """

    elements: tuple[str, ...]
    cells: np.ndarray

    @classmethod
    def from_counts(cls, counts: Sequence[ElementCount]) -> StoichiometricMatrix:
        elements: dict[str, None] = {}
        for compound in counts:
            for symbol in compound:
                elements.setdefault(symbol, None)

        cells = np.full((len(elements), len(counts)), Fraction(0), dtype=object)
        for i, symbol in enumerate(elements):
            for j, compound in enumerate(counts):
                cells[i, j] = Fraction(compound.get(symbol, 0))
        return cls(elements=tuple(elements), cells=cells)

    @property
    def shape(self) -> tuple[int, int]:
        return self.cells.shape

    def row(self, symbol: str) -> list[Fraction]:
        return list(self.cells[self.elements.index(symbol)])


@dataclass(frozen=True)
class ParsedReaction:
    matrix: StoichiometricMatrix
    lhs: tuple[str, ...]
    rhs: tuple[str, ...]

    @property
    def compounds(self) -> tuple[str, ...]:
        return self.lhs + self.rhs


@dataclass(frozen=True)
class BalancedReaction:
    lhs: tuple[str, ...]
    rhs: tuple[str, ...]
    coefficients: tuple[int, ...]

    def render(self) -> str:
        """Render as ``2H2 + O2 -> 2H2O``, omitting coefficients equal to 1."""
        terms = [
            compound if coefficient == 1 else f"{coefficient}{compound}"
            for coefficient, compound in zip(self.coefficients, self.lhs + self.rhs, strict=True)
        ]
        split = len(self.lhs)
        return " + ".join(terms[:split]) + " -> " + " + ".join(terms[split:])

    def as_dict(self) -> dict[str, object]:
        return {
            "balanced": self.render(),
            "reactants": [
                {"compound": compound, "coefficient": coefficient}
                for compound, coefficient in zip(self.lhs, self.coefficients[: len(self.lhs)])
            ],
            "products": [
                {"compound": compound, "coefficient": coefficient}
                for compound, coefficient in zip(self.rhs, self.coefficients[len(self.lhs) :])
            ],
        }

    def __str__(self) -> str:
        return self.render()
