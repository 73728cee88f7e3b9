"""Compounds and compound sets (sequence alphabets).

A compound set maps short strings to compounds and reports the longest string
any of its compounds uses. The amino-acid set is built from Biopython's IUPAC
tables.
"""

from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, Iterable, List, Optional

from Bio.Data import IUPACData


@dataclass(frozen=True)
class Compound:
    """A single symbol of an alphabet."""

    short_name: str
    # Display data only; identity is the symbol string
    long_name: str = field(default="", compare=False)
    description: str = field(default="", compare=False)

    def equals_ignore_case(self, other: object) -> bool:
        if not isinstance(other, Compound):
            return False
        return self.short_name.upper() == other.short_name.upper()

    def __str__(self) -> str:
        return self.short_name


class CompoundSet:
    """Interface every alphabet implements."""

    def get_compound_for_string(self, string: str) -> Optional[Compound]:
        raise NotImplementedError

    @property
    def max_single_compound_string_length(self) -> int:
        raise NotImplementedError

    def get_all_compounds(self) -> List[Compound]:
        raise NotImplementedError


class SimpleCompoundSet(CompoundSet):
    """Compound set backed by a dictionary of symbol strings.

    Args:
        compounds: Compounds (or plain strings) making up the alphabet
        case_sensitive: When False, lookups are upper-cased first
    """

    def __init__(self, compounds: Iterable, case_sensitive: bool = True):
        self.case_sensitive = case_sensitive
        self._compounds: Dict[str, Compound] = {}
        for compound in compounds:
            if isinstance(compound, str):
                compound = Compound(compound)
            key = compound.short_name if case_sensitive else compound.short_name.upper()
            self._compounds[key] = compound
        self._max_length = max((len(k) for k in self._compounds), default=0)

    def get_compound_for_string(self, string: str) -> Optional[Compound]:
        if not string:
            return None
        key = string if self.case_sensitive else string.upper()
        return self._compounds.get(key)

    @property
    def max_single_compound_string_length(self) -> int:
        return self._max_length

    def get_all_compounds(self) -> List[Compound]:
        return list(self._compounds.values())

    def __contains__(self, string: str) -> bool:
        return self.get_compound_for_string(string) is not None

    def __len__(self) -> int:
        return len(self._compounds)


class AminoAcidCompoundSet(SimpleCompoundSet):
    """Protein alphabet: the extended IUPAC letters plus stop and gap symbols.

    Lookups are case-insensitive. Use :func:`get_amino_acid_compound_set` to
    share a single instance, since sequences only compare equal when they use
    the same compound set object.
    """

    EXTRA_SYMBOLS = {
        "*": ("Stop", "Translation stop"),
        "-": ("Gap", "Alignment gap"),
    }

    def __init__(self):
        compounds = []
        for letter in IUPACData.extended_protein_letters:
            three_letter = IUPACData.protein_letters_1to3_extended.get(letter, "")
            compounds.append(Compound(letter, three_letter))
        for symbol, (long_name, description) in self.EXTRA_SYMBOLS.items():
            compounds.append(Compound(symbol, long_name, description))
        super().__init__(compounds, case_sensitive=False)


_amino_acid_set: Optional[AminoAcidCompoundSet] = None
_amino_acid_lock = Lock()


def get_amino_acid_compound_set() -> AminoAcidCompoundSet:
    """Get the shared amino-acid compound set."""
    global _amino_acid_set
    with _amino_acid_lock:
        if _amino_acid_set is None:
            _amino_acid_set = AminoAcidCompoundSet()
        return _amino_acid_set
