"""UniProt proxy sequences.

Resolve a UniProt accession to a validated protein sequence backed by the
remote UniProt XML record, with on-disk caching and bounded retry.
"""

__version__ = "1.0.0"
__author__ = "Austin P. Morrissey"

from .accession import is_valid_accession, validate_accession
from .alphabet import (
    AminoAcidCompoundSet,
    Compound,
    CompoundSet,
    SimpleCompoundSet,
    get_amino_acid_compound_set,
)
from .config import Config, get_default_config
from .exceptions import (
    CacheIOError,
    DocumentParseError,
    FetchError,
    InvalidSymbolError,
    OutOfRangeError,
    UniProtProxyError,
    UnsupportedOperationError,
    ValidationError,
)
from .fetcher import CachedFetcher
from .models import AccessionID, DBReference, DataSource
from .sequence import ProxySequence, SequenceView

__all__ = [
    "AccessionID",
    "AminoAcidCompoundSet",
    "CacheIOError",
    "CachedFetcher",
    "Compound",
    "CompoundSet",
    "Config",
    "DBReference",
    "DataSource",
    "DocumentParseError",
    "FetchError",
    "InvalidSymbolError",
    "OutOfRangeError",
    "ProxySequence",
    "SequenceView",
    "SimpleCompoundSet",
    "UniProtProxyError",
    "UnsupportedOperationError",
    "ValidationError",
    "get_amino_acid_compound_set",
    "get_default_config",
    "is_valid_accession",
    "validate_accession",
]
