"""Split a raw sequence string into compounds of an alphabet."""

import re
from typing import Tuple

from .alphabet import Compound, CompoundSet
from .exceptions import InvalidSymbolError

_WHITESPACE = re.compile(r"\s+")


def strip_whitespace(raw: str) -> str:
    """Remove every whitespace character; UniProt wraps sequence text."""
    return _WHITESPACE.sub("", raw)


def tokenize(raw: str, compound_set: CompoundSet) -> Tuple[Compound, ...]:
    """
    Decompose a sequence string into compounds.

    Whitespace is removed first. At each position the shortest substring
    (1 up to the compound set's maximum length) that resolves to a compound
    wins. Alphabets with a multi-character symbol whose prefix is also a
    symbol are therefore not supported: with ``{"A", "AB"}`` the input
    ``"AB"`` matches ``A`` and then fails on ``B``.

    Args:
        raw: Sequence text as found in the record
        compound_set: Alphabet to resolve symbols against

    Returns:
        Tuple of compounds, in sequence order

    Raises:
        InvalidSymbolError: No compound matches at some position (1-based)
    """
    sequence = strip_whitespace(raw)
    max_length = compound_set.max_single_compound_string_length
    compounds = []
    i = 0
    while i < len(sequence):
        compound = None
        length = 0
        for length in range(1, min(max_length, len(sequence) - i) + 1):
            compound = compound_set.get_compound_for_string(sequence[i:i + length])
            if compound is not None:
                break
        if compound is None:
            raise InvalidSymbolError(sequence[i], i + 1)
        compounds.append(compound)
        i += length
    return tuple(compounds)
