"""chembalance core package."""

from chembalance.balancer import balance, balance_reaction, solve_coefficients
from chembalance.errors import (
    BalanceError,
    Contradiction,
    EmptyFormula,
    InvalidElementSymbol,
    MalformedReaction,
    NotBalanceable,
    ParseError,
    UnbalancedParentheses,
    Underdetermined,
    Unsolvable,
)
from chembalance.formula import parse_compound
from chembalance.models import BalancedReaction, ParsedReaction, StoichiometricMatrix
from chembalance.reaction import parse_reaction

__all__ = [
    "balance",
    "balance_reaction",
    "solve_coefficients",
    "parse_compound",
    "parse_reaction",
    "BalancedReaction",
    "ParsedReaction",
    "StoichiometricMatrix",
    "BalanceError",
    "ParseError",
    "UnbalancedParentheses",
    "InvalidElementSymbol",
    "EmptyFormula",
    "MalformedReaction",
    "Underdetermined",
    "Unsolvable",
    "Contradiction",
    "NotBalanceable",
]
