"""Reaction string parsing and stoichiometric matrix assembly."""

from __future__ import annotations

import logging
import re
from typing import Container

from chembalance.errors import MalformedReaction
from chembalance.formula import parse_compound
from chembalance.models import ElementCount, ParsedReaction, StoichiometricMatrix

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")
_LEADING_COEFFICIENT = re.compile(r"^[0-9]+")


def normalize_reaction(text: str) -> str:
    """Strip whitespace and rewrite every arrow (``->``, ``−>``, ``-->``) as ``=``."""
    text = _WHITESPACE.sub("", text)
    text = _DASHES.sub("-", text.replace("−", "-"))
    return text.replace("->", "=")


def _split_side(side: str) -> list[str]:
    compounds = []
    for token in side.split("+"):
        compound = _LEADING_COEFFICIENT.sub("", token)
        if compound != token:
            logger.debug("Discarding coefficient %s of %s", token[: len(token) - len(compound)], compound)
        compounds.append(compound)
    return compounds


def _negated(counts: ElementCount) -> ElementCount:
    return {symbol: -count for symbol, count in counts.items()}


def parse_reaction(text: str, symbols: Container[str] | None = None) -> ParsedReaction:
    """Parse ``H2 + O2 = H2O`` into its compounds and stoichiometric matrix.

    Raises:
        MalformedReaction: The reaction does not have exactly one separator.
        ParseError: Any compound fails to parse; no partial result is kept.
    """
    sides = normalize_reaction(text).split("=")
    if len(sides) != 2:
        raise MalformedReaction(len(sides) - 1)

    lhs = _split_side(sides[0])
    rhs = _split_side(sides[1])

    counts = [parse_compound(compound, symbols) for compound in lhs]
    counts.extend(_negated(parse_compound(compound, symbols)) for compound in rhs)

    matrix = StoichiometricMatrix.from_counts(counts)
    logger.debug("Parsed %d compounds over elements %s", len(counts), ", ".join(matrix.elements))
    return ParsedReaction(matrix=matrix, lhs=tuple(lhs), rhs=tuple(rhs))
