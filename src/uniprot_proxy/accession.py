"""UniProt accession number validation.

Patterns follow https://www.uniprot.org/help/accession_numbers.
"""

import re

from .exceptions import ValidationError

SPID_PATTERN = r"[OPQ][0-9][A-Z0-9]{3}[0-9]"
TREMBLID_PATTERN = r"[A-NR-Z][0-9]([A-Z][A-Z0-9]{2}[0-9]){1,2}"
UP_AC_PATTERN = re.compile(f"({SPID_PATTERN}|{TREMBLID_PATTERN})")


def is_valid_accession(accession: str) -> bool:
    """Check whether a string is a well-formed UniProt accession (case-insensitive)."""
    if not isinstance(accession, str):
        return False
    return UP_AC_PATTERN.fullmatch(accession.upper()) is not None


def validate_accession(accession: str) -> str:
    """Return the accession unchanged, or raise ValidationError."""
    if not is_valid_accession(accession):
        raise ValidationError(accession)
    return accession
