from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

D = Decimal
_ZERO = D("0")


class BracketConfigError(ValueError):
    pass


@dataclass(frozen=True)
class TaxBracket:
    lower: D
    upper: D | None
    rate: D


def bracket(lower: str | int, upper: str | int | None, rate: str) -> TaxBracket:
    return TaxBracket(
        lower=D(str(lower)),
        upper=D(str(upper)) if upper is not None else None,
        rate=D(rate),
    )


def validate_brackets(brackets: Sequence[TaxBracket]) -> tuple[TaxBracket, ...]:
    """Check a bracket table once at load time and return it as a tuple.

    Tables must start at zero, chain without gaps or overlaps and end with a
    single unbounded bracket.
    """
    table = tuple(brackets)
    if not table:
        raise BracketConfigError("Bracket table is empty")
    if table[0].lower != _ZERO:
        raise BracketConfigError(f"First bracket must start at 0, got {table[0].lower}")
    for index, item in enumerate(table):
        if item.rate < _ZERO:
            raise BracketConfigError(f"Bracket {index} has negative rate {item.rate}")
        last = index == len(table) - 1
        if item.upper is None:
            if not last:
                raise BracketConfigError(f"Only the last bracket may be unbounded (bracket {index})")
            continue
        if last:
            raise BracketConfigError("Last bracket must be unbounded")
        if item.upper <= item.lower:
            raise BracketConfigError(
                f"Bracket {index} upper bound {item.upper} must exceed lower bound {item.lower}"
            )
        following = table[index + 1]
        if following.lower != item.upper:
            raise BracketConfigError(
                f"Bracket {index + 1} starts at {following.lower}, expected {item.upper}"
            )
    return table


def compute_bracket_tax(income: D, brackets: Iterable[TaxBracket]) -> D:
    tax = _ZERO
    for item in brackets:
        if income <= item.lower:
            break
        top = income if item.upper is None else min(income, item.upper)
        tax += (top - item.lower) * item.rate
    return max(_ZERO, tax)


__all__ = [
    "BracketConfigError",
    "TaxBracket",
    "bracket",
    "compute_bracket_tax",
    "validate_brackets",
]
