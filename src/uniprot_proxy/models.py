"""Data models for the UniProt proxy."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class DataSource(Enum):
    """Database an identifier belongs to."""
    UNIPROT = "uniprot"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AccessionID:
    """An identifier together with the database it comes from."""

    identifier: str = ""
    source: DataSource = DataSource.UNKNOWN

    def __bool__(self) -> bool:
        return bool(self.identifier)

    def __str__(self) -> str:
        return self.identifier


@dataclass
class DBReference:
    """Cross-reference from a UniProt entry to another database."""

    type: str
    id: str
    properties: Dict[str, str] = field(default_factory=dict)

    def add_property(self, key: str, value: str) -> None:
        self.properties[key] = value

    @property
    def dbxref(self) -> str:
        """Reference in ``TYPE:ID`` form, as used by Biopython ``dbxrefs``."""
        return f"{self.type}:{self.id}"


class FieldStatus(Enum):
    """Outcome of extracting one metadata field."""
    PRESENT = "present"
    ABSENT = "absent"
    MALFORMED = "malformed"


@dataclass
class FieldResult:
    """Extracted field value plus whether it was present, absent or malformed."""

    value: Any
    status: FieldStatus = FieldStatus.PRESENT
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == FieldStatus.PRESENT
