"""Protein sequences backed by a UniProt XML record."""

import xml.etree.ElementTree as ET
from typing import Dict, Iterator, List, Optional, Tuple

import pandas as pd
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from .accession import validate_accession
from .alphabet import Compound, CompoundSet, get_amino_acid_compound_set
from .exceptions import OutOfRangeError, UnsupportedOperationError
from .extractor import RecordExtractor
from .fetcher import CachedFetcher
from .logging_config import get_logger
from .models import AccessionID, DBReference
from .tokenizer import tokenize
from .xml_helper import parse_record, strip_default_namespace

logger = get_logger('sequence')


class _SequenceReadMixin:
    """Read operations shared by sequences and their views.

    Subclasses provide ``__len__`` and ``compound_at`` (1-based).
    """

    def __iter__(self) -> Iterator[Compound]:
        for position in range(1, len(self) + 1):
            yield self.compound_at(position)

    def index_of(self, compound: Compound) -> int:
        """1-based position of the first occurrence (ignoring case), 0 if absent."""
        for position, candidate in enumerate(self, start=1):
            if candidate.equals_ignore_case(compound):
                return position
        return 0

    def last_index_of(self, compound: Compound) -> int:
        """1-based position of the last occurrence (ignoring case), 0 if absent."""
        last = 0
        for position, candidate in enumerate(self, start=1):
            if candidate.equals_ignore_case(compound):
                last = position
        return last

    def sequence_as_string(self) -> str:
        return "".join(compound.short_name for compound in self)

    def __str__(self) -> str:
        return self.sequence_as_string()

    def _check_position(self, position: int) -> None:
        if not 1 <= position <= len(self):
            raise OutOfRangeError(position, len(self))


class SequenceView(_SequenceReadMixin):
    """
    Window ``[begin, end]`` (1-based, inclusive) onto another sequence.

    Nothing is copied; every access reads through to the owning sequence.
    """

    def __init__(self, owner, begin: int, end: int):
        if begin < 1:
            raise OutOfRangeError(begin, len(owner))
        if end > len(owner) or end < begin - 1:
            raise OutOfRangeError(end, len(owner))
        self.owner = owner
        self.begin = begin
        self.end = end

    def __len__(self) -> int:
        return self.end - self.begin + 1

    def compound_at(self, position: int) -> Compound:
        self._check_position(position)
        return self.owner.compound_at(self.begin + position - 1)

    def sub_sequence(self, begin: int, end: int) -> 'SequenceView':
        return SequenceView(self, begin, end)

    @property
    def compound_set(self) -> CompoundSet:
        return self.owner.compound_set

    def __repr__(self) -> str:
        return f"SequenceView({self.owner!r}, {self.begin}, {self.end})"


class InverseSequenceView(_SequenceReadMixin):
    """The owning sequence read from last compound to first."""

    def __init__(self, owner):
        self.owner = owner

    def __len__(self) -> int:
        return len(self.owner)

    def compound_at(self, position: int) -> Compound:
        self._check_position(position)
        return self.owner.compound_at(len(self.owner) - position + 1)

    @property
    def compound_set(self) -> CompoundSet:
        return self.owner.compound_set


class ProxySequence(_SequenceReadMixin):
    """
    A protein sequence whose content comes from a UniProt record.

    Passing an accession fetches the record (cache first, then network),
    extracts the sequence text and splits it into compounds of the given
    compound set. The record, metadata and compounds never change after
    construction. Positions are 1-based throughout.

    Metadata accessors (``gene_name()``, ``keywords()`` ...) read the record
    on every call and return empty values when a field is missing.
    """

    def __init__(self,
                 accession: str,
                 compound_set: Optional[CompoundSet] = None,
                 fetcher: Optional[CachedFetcher] = None):
        """
        Fetch a record and build its sequence.

        Args:
            accession: UniProt accession (validated before any I/O)
            compound_set: Alphabet (shared amino-acid set if None)
            fetcher: Record source (a default CachedFetcher if None)

        Raises:
            ValidationError: Malformed accession
            FetchError, CacheIOError: Record could not be obtained
            DocumentParseError: Record is not well-formed XML
            InvalidSymbolError: Sequence text outside the alphabet
        """
        validate_accession(accession)
        if fetcher is None:
            with CachedFetcher() as default_fetcher:
                data = default_fetcher.fetch(accession)
        else:
            data = fetcher.fetch(accession)
        record = parse_record(data)
        self._init_from_record(record, compound_set)

    def _init_from_record(self, record: ET.Element, compound_set: Optional[CompoundSet]) -> None:
        self._compound_set = compound_set if compound_set is not None else get_amino_acid_compound_set()
        self._extractor = RecordExtractor()
        self._record = record
        self._compounds: Tuple[Compound, ...] = tokenize(
            self._extractor.sequence(record), self._compound_set
        )
        logger.debug(f"Built sequence of {len(self._compounds)} compounds")

    @classmethod
    def from_document(cls, record: ET.Element, compound_set: Optional[CompoundSet] = None) -> 'ProxySequence':
        """Build from an already parsed ``<uniprot>`` document element."""
        instance = cls.__new__(cls)
        instance._init_from_record(record, compound_set)
        return instance

    @classmethod
    def from_xml_string(cls, xml, compound_set: Optional[CompoundSet] = None) -> 'ProxySequence':
        """Build from UniProt XML text or bytes, without any network access."""
        if isinstance(xml, str):
            xml = xml.encode('utf-8')
        return cls.from_document(parse_record(strip_default_namespace(xml)), compound_set)

    # Sequence interface

    @property
    def compound_set(self) -> CompoundSet:
        return self._compound_set

    @property
    def record(self) -> ET.Element:
        return self._record

    def __len__(self) -> int:
        return len(self._compounds)

    @property
    def length(self) -> int:
        return len(self._compounds)

    def compound_at(self, position: int) -> Compound:
        """Compound at a 1-based position."""
        self._check_position(position)
        return self._compounds[position - 1]

    def __iter__(self) -> Iterator[Compound]:
        return iter(self._compounds)

    def as_list(self) -> List[Compound]:
        return list(self._compounds)

    def sequence_as_string(self, begin: Optional[int] = None, end: Optional[int] = None) -> str:
        """The sequence rebuilt from its compounds, optionally for ``[begin, end]``."""
        if begin is None and end is None:
            return "".join(compound.short_name for compound in self._compounds)
        return self.sub_sequence(1 if begin is None else begin, len(self) if end is None else end).sequence_as_string()

    def sub_sequence(self, begin: int, end: int) -> SequenceView:
        return SequenceView(self, begin, end)

    def inverse(self) -> InverseSequenceView:
        return InverseSequenceView(self)

    def count_compounds(self, *compounds: Compound) -> int:
        raise UnsupportedOperationError("Counting compounds is not supported")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProxySequence) or type(other) is not type(self):
            return NotImplemented
        if other.compound_set is not self.compound_set:
            return False
        if len(self) != len(other):
            return False
        return all(mine.equals_ignore_case(theirs) for mine, theirs in zip(self, other))

    def __hash__(self) -> int:
        return hash(self.sequence_as_string().upper())

    def __repr__(self) -> str:
        return f"ProxySequence({self.accession.identifier!r}, length={len(self)})"

    # Metadata

    @property
    def accession(self) -> AccessionID:
        """Entry name (e.g. ``ABL1_HUMAN``) as an identifier."""
        return self._extractor.name(self._record)

    def accessions(self) -> List[AccessionID]:
        return self._extractor.accessions(self._record)

    def protein_name(self) -> str:
        return self._extractor.protein_name(self._record)

    def protein_aliases(self) -> List[str]:
        return self._extractor.protein_aliases(self._record)

    def aliases(self) -> List[str]:
        """Same as :meth:`protein_aliases`."""
        return self.protein_aliases()

    def gene_aliases(self) -> List[str]:
        return self._extractor.gene_aliases(self._record)

    def gene_name(self) -> str:
        return self._extractor.gene_name(self._record)

    def organism_name(self) -> str:
        return self._extractor.organism_name(self._record)

    def keywords(self) -> List[str]:
        return self._extractor.keywords(self._record)

    def database_references(self) -> Dict[str, List[DBReference]]:
        return self._extractor.database_references(self._record)

    def database_references_table(self) -> pd.DataFrame:
        return self._extractor.database_references_table(self._record)

    # Biopython interop

    def to_seq(self) -> Seq:
        return Seq(self.sequence_as_string())

    def to_seq_record(self) -> SeqRecord:
        """Sequence plus identifiers, description and cross-references."""
        accessions = self.accessions()
        record = SeqRecord(
            self.to_seq(),
            id=accessions[0].identifier if accessions else self.accession.identifier,
            name=self.accession.identifier,
            description=self.protein_name(),
            dbxrefs=[ref.dbxref for refs in self.database_references().values() for ref in refs],
        )
        record.annotations['molecule_type'] = 'protein'
        record.annotations['organism'] = self.organism_name()
        record.annotations['keywords'] = self.keywords()
        if self.gene_name():
            record.annotations['gene_name'] = self.gene_name()
        return record
