"""Error taxonomy for reaction parsing and balancing."""

from __future__ import annotations


class BalanceError(Exception):
    """Base class for every recoverable parsing or balancing failure."""


class ParseError(BalanceError):
    """A single compound formula could not be parsed."""

    def __init__(self, compound: str, message: str) -> None:
        super().__init__(message)
        self.compound = compound


class UnbalancedParentheses(ParseError):
    def __init__(self, compound: str, too_many: bool) -> None:
        if too_many:
            message = f"Compound {compound} has too many closing parentheses"
        else:
            message = f"Compound {compound} does not have enough closing parentheses"
        super().__init__(compound, message)
        self.too_many = too_many


class InvalidElementSymbol(ParseError):
    def __init__(self, compound: str, position: int) -> None:
        super().__init__(compound, f"Invalid compound: {compound}")
        self.position = position


class EmptyFormula(ParseError):
    def __init__(self, compound: str = "") -> None:
        super().__init__(compound, f"Empty compound in reaction: {compound!r}")


class MalformedReaction(BalanceError):
    def __init__(self, count: int) -> None:
        super().__init__(f"Expected exactly 1 =, found {count}")
        self.count = count


class Underdetermined(BalanceError):
    def __init__(self, equations: int, compounds: int) -> None:
        super().__init__(
            "There are fewer equations than compounds: unable to balance "
            f"({equations} elements, {compounds} compounds)"
        )
        self.equations = equations
        self.compounds = compounds


class Unsolvable(BalanceError):
    def __init__(self, column: int) -> None:
        super().__init__("System of equations is unsolvable")
        self.column = column


class Contradiction(BalanceError):
    def __init__(self, row: int) -> None:
        super().__init__("System of equations contains contradictions")
        self.row = row


class NotBalanceable(BalanceError):
    def __init__(self, compound: str) -> None:
        super().__init__(f"Reaction cannot be balanced (no valid coefficient for {compound})")
        self.compound = compound
