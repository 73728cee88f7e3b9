"""Tests for ProxySequence."""

from unittest.mock import Mock, patch

import pytest

from uniprot_proxy.alphabet import (
    AminoAcidCompoundSet,
    Compound,
    SimpleCompoundSet,
    get_amino_acid_compound_set,
)
from uniprot_proxy.error_handler import ErrorHandler
from uniprot_proxy.exceptions import (
    DocumentParseError,
    FetchError,
    InvalidSymbolError,
    OutOfRangeError,
    UnsupportedOperationError,
    ValidationError,
)
from uniprot_proxy.fetcher import CachedFetcher
from uniprot_proxy.models import DataSource
from uniprot_proxy.sequence import ProxySequence, SequenceView


@pytest.fixture
def mock_fetcher(stripped_xml):
    """Fetcher double serving HBA_HUMAN."""
    fetcher = Mock()
    fetcher.fetch.return_value = stripped_xml
    return fetcher


@pytest.fixture
def hba(mock_fetcher):
    return ProxySequence("P69905", fetcher=mock_fetcher)


@pytest.fixture
def amino():
    return get_amino_acid_compound_set()


class TestConstruction:
    """Test cases for building sequences."""

    def test_from_fetcher(self, hba, mock_fetcher, hba_sequence):
        """Test the record is fetched and tokenized."""
        mock_fetcher.fetch.assert_called_once_with("P69905")
        assert len(hba) == 142
        assert hba.length == 142
        assert hba.sequence_as_string() == hba_sequence
        assert hba.compound_set is get_amino_acid_compound_set()

    def test_invalid_accession_no_fetch(self, mock_fetcher):
        """Test a malformed accession fails before fetching."""
        with pytest.raises(ValidationError):
            ProxySequence("P1234", fetcher=mock_fetcher)

        mock_fetcher.fetch.assert_not_called()

    def test_from_cache_without_network(self, populated_cache_dir, config, hba_sequence):
        """Test a cached record is used without any network call."""
        config.set_cache_directory(str(populated_cache_dir))
        session = Mock()
        fetcher = CachedFetcher(config, session=session, error_handler=ErrorHandler())

        sequence = ProxySequence("P69905", fetcher=fetcher)

        assert str(sequence) == hba_sequence
        session.get.assert_not_called()
        assert fetcher.cache_hits == 1

    def test_fetch_error_propagates(self, mock_fetcher):
        """Test fetch failures abort construction."""
        mock_fetcher.fetch.side_effect = FetchError("https://www.uniprot.org/uniprot/P69905.xml", ["500"] * 5)

        with pytest.raises(FetchError):
            ProxySequence("P69905", fetcher=mock_fetcher)

    def test_parse_error(self, mock_fetcher):
        """Test malformed XML aborts construction."""
        mock_fetcher.fetch.return_value = b"<uniprot><entry>"

        with pytest.raises(DocumentParseError):
            ProxySequence("P69905", fetcher=mock_fetcher)

    def test_invalid_symbol(self, mock_fetcher, entry_xml):
        """Test sequence text outside the alphabet aborts construction."""
        mock_fetcher.fetch.return_value = entry_xml("<sequence>MV1LS</sequence>")

        with pytest.raises(InvalidSymbolError) as exc_info:
            ProxySequence("P69905", fetcher=mock_fetcher)

        assert exc_info.value.position == 3

    def test_missing_sequence_is_empty(self, mock_fetcher, entry_xml):
        """Test an entry without sequence gives an empty sequence."""
        mock_fetcher.fetch.return_value = entry_xml("<name>TEST_HUMAN</name>")

        sequence = ProxySequence("P69905", fetcher=mock_fetcher)

        assert len(sequence) == 0
        assert sequence.sequence_as_string() == ""
        assert sequence.accession.identifier == "TEST_HUMAN"

    def test_from_xml_string(self, sample_xml, hba_sequence):
        """Test building from namespaced text without a fetcher."""
        from_bytes = ProxySequence.from_xml_string(sample_xml)
        from_text = ProxySequence.from_xml_string(sample_xml.decode('utf-8'))

        assert from_bytes.sequence_as_string() == hba_sequence
        assert from_text == from_bytes

    def test_from_xml_string_single_quoted_namespace(self, entry_xml):
        """Test a single-quoted default namespace is removed before selection."""
        data = entry_xml("<name>X_HUMAN</name><sequence>MVLS</sequence>").replace(
            b"<uniprot>", b"<uniprot xmlns='http://uniprot.org/uniprot'>")

        sequence = ProxySequence.from_xml_string(data)

        assert sequence.sequence_as_string() == "MVLS"
        assert sequence.accession.identifier == "X_HUMAN"

    def test_default_fetcher_is_closed(self, stripped_xml):
        """Test the fetcher created when none is given is closed after use."""
        with patch("uniprot_proxy.sequence.CachedFetcher") as fetcher_class:
            default_fetcher = fetcher_class.return_value
            default_fetcher.__enter__.return_value = default_fetcher
            default_fetcher.fetch.return_value = stripped_xml

            sequence = ProxySequence("P69905")

        assert len(sequence) == 142
        default_fetcher.fetch.assert_called_once_with("P69905")
        default_fetcher.__exit__.assert_called_once()

    def test_from_document(self, sample_record):
        """Test building from a parsed record."""
        sequence = ProxySequence.from_document(sample_record)

        assert sequence.record is sample_record
        assert len(sequence) == 142

    def test_custom_compound_set(self, entry_xml):
        """Test a caller-supplied alphabet."""
        dna = SimpleCompoundSet("ACGT")

        sequence = ProxySequence.from_xml_string(entry_xml("<sequence>ACG\nTTA</sequence>"), dna)

        assert sequence.compound_set is dna
        assert str(sequence) == "ACGTTA"


class TestSequenceAccess:
    """Test cases for positional access."""

    def test_compound_at(self, hba):
        """Test 1-based access."""
        assert hba.compound_at(1).short_name == "M"
        assert hba.compound_at(15).short_name == "W"
        assert hba.compound_at(142).short_name == "R"

    @pytest.mark.parametrize("position", [0, -1, 143])
    def test_compound_at_out_of_range(self, hba, position):
        """Test positions outside [1, length] raise."""
        with pytest.raises(OutOfRangeError) as exc_info:
            hba.compound_at(position)

        assert exc_info.value.length == 142
        assert isinstance(exc_info.value, IndexError)

    def test_iteration(self, hba, hba_sequence):
        """Test iteration yields compounds in order."""
        assert "".join(c.short_name for c in hba) == hba_sequence
        assert len(hba.as_list()) == 142

    def test_as_list_is_a_copy(self, hba):
        """Test the returned list does not alias internal state."""
        compounds = hba.as_list()
        compounds.clear()

        assert len(hba) == 142

    def test_index_of(self, hba, amino):
        """Test first and last positions of a compound."""
        methionine = amino.get_compound_for_string("M")

        assert hba.index_of(methionine) == 1
        assert hba.last_index_of(methionine) == 77

    def test_index_of_bare_compound(self, hba):
        """Test a compound built without names is found."""
        assert hba.index_of(Compound("M")) == 1
        assert hba.last_index_of(Compound("M")) == 77

    def test_index_of_ignores_case(self, hba):
        """Test lower-case symbols match upper-case residues."""
        assert hba.index_of(Compound("m")) == 1
        assert hba.last_index_of(Compound("m")) == 77
        assert hba.index_of(Compound("w")) == 15

    def test_index_of_single_occurrence(self, hba, amino):
        """Test a compound occurring once."""
        tryptophan = amino.get_compound_for_string("W")

        assert hba.index_of(tryptophan) == 15
        assert hba.last_index_of(tryptophan) == 15

    def test_index_of_absent(self, hba, amino):
        """Test a compound not in the sequence."""
        isoleucine = amino.get_compound_for_string("I")

        assert hba.index_of(isoleucine) == 0
        assert hba.last_index_of(isoleucine) == 0

    def test_sequence_as_string_range(self, hba):
        """Test the string of a sub-range."""
        assert hba.sequence_as_string(2, 5) == "VLSP"
        assert hba.sequence_as_string(140) == "KYR"
        assert hba.sequence_as_string(end=3) == "MVL"

    def test_count_compounds_unsupported(self, hba, amino):
        """Test counting compounds is not supported."""
        with pytest.raises(UnsupportedOperationError):
            hba.count_compounds(amino.get_compound_for_string("M"))

        with pytest.raises(NotImplementedError):
            hba.count_compounds()


class TestViews:
    """Test cases for sub-sequence and inverse views."""

    def test_sub_sequence(self, hba):
        """Test a view over positions 2 to 5."""
        view = hba.sub_sequence(2, 5)

        assert isinstance(view, SequenceView)
        assert len(view) == 4
        assert str(view) == "VLSP"
        assert view.compound_at(1).short_name == "V"
        assert view.compound_set is hba.compound_set

    def test_sub_sequence_is_lazy(self, hba):
        """Test creating a view reads nothing until compounds are requested."""
        with patch.object(hba, 'compound_at', wraps=hba.compound_at) as spy:
            view = hba.sub_sequence(2, 5)
            spy.assert_not_called()

            assert view.sequence_as_string() == "VLSP"
            assert spy.call_count == 4

    def test_nested_sub_sequence(self, hba):
        """Test views of views."""
        assert str(hba.sub_sequence(2, 20).sub_sequence(1, 4)) == "VLSP"

    def test_empty_sub_sequence(self, hba):
        """Test a view with end = begin - 1 is empty."""
        view = hba.sub_sequence(5, 4)

        assert len(view) == 0
        assert str(view) == ""

    @pytest.mark.parametrize("begin,end", [(0, 5), (140, 143), (5, 3)])
    def test_sub_sequence_out_of_range(self, hba, begin, end):
        """Test invalid view bounds raise."""
        with pytest.raises(OutOfRangeError):
            hba.sub_sequence(begin, end)

    def test_view_position_out_of_range(self, hba):
        """Test positions are relative to the view."""
        view = hba.sub_sequence(2, 5)

        with pytest.raises(OutOfRangeError):
            view.compound_at(5)

    def test_view_index_of(self, hba, amino):
        """Test searching within a view."""
        view = hba.sub_sequence(30, 80)
        methionine = amino.get_compound_for_string("M")

        assert view.index_of(methionine) == 4
        assert view.last_index_of(methionine) == 48

    def test_inverse(self, hba, hba_sequence):
        """Test reading the sequence backwards."""
        inverse = hba.inverse()

        assert len(inverse) == 142
        assert inverse.compound_at(1).short_name == "R"
        assert inverse.compound_at(142).short_name == "M"
        assert str(inverse) == hba_sequence[::-1]


class TestEquality:
    """Test cases for equality and hashing."""

    def test_equal_sequences(self, sample_xml):
        """Test two sequences of the same record are equal and hash alike."""
        first = ProxySequence.from_xml_string(sample_xml)
        second = ProxySequence.from_xml_string(sample_xml)

        assert first == second
        assert hash(first) == hash(second)

    def test_equality_ignores_case(self, entry_xml):
        """Test compounds are compared ignoring case."""
        mixed = SimpleCompoundSet("ACGTacgt")

        upper = ProxySequence.from_xml_string(entry_xml("<sequence>ACGT</sequence>"), mixed)
        lower = ProxySequence.from_xml_string(entry_xml("<sequence>acgt</sequence>"), mixed)

        assert str(upper) != str(lower)
        assert upper == lower
        assert hash(upper) == hash(lower)

    def test_different_compound_set_instances(self, sample_xml):
        """Test sequences over distinct compound set objects differ."""
        shared = ProxySequence.from_xml_string(sample_xml)
        private = ProxySequence.from_xml_string(sample_xml, AminoAcidCompoundSet())

        assert shared != private

    def test_different_lengths(self, sample_xml, entry_xml):
        """Test a prefix is not equal to the full sequence."""
        full = ProxySequence.from_xml_string(sample_xml)
        prefix = ProxySequence.from_xml_string(entry_xml("<sequence>MVLSP</sequence>"))

        assert full != prefix

    def test_other_types(self, hba, hba_sequence):
        """Test comparison with unrelated objects."""
        assert hba != hba_sequence
        assert hba != None  # noqa: E711

    def test_usable_in_sets(self, sample_xml):
        """Test equal sequences collapse in a set."""
        sequences = {ProxySequence.from_xml_string(sample_xml) for _ in range(3)}
        assert len(sequences) == 1


class TestMetadata:
    """Test cases for metadata accessors."""

    def test_identifiers(self, hba):
        """Test entry name and accessions."""
        assert hba.accession.identifier == "HBA_HUMAN"
        assert hba.accession.source == DataSource.UNIPROT
        assert [a.identifier for a in hba.accessions()] == ["P69905", "P01922", "Q1HDT5"]

    def test_names(self, hba):
        """Test protein, gene and organism names."""
        assert hba.protein_name() == "Hemoglobin subunit alpha"
        assert hba.gene_name() == "HBA1"
        assert hba.gene_aliases() == ["HBA1", "HBA", "HBA2"]
        assert hba.organism_name() == "Homo sapiens"

    def test_aliases(self, hba):
        """Test protein aliases."""
        assert hba.aliases() == hba.protein_aliases()
        assert "Hb-alpha" in hba.aliases()
        assert "Hemopressin" in hba.aliases()

    def test_keywords(self, hba):
        assert hba.keywords() == ["Heme", "Iron", "Oxygen transport"]

    def test_database_references(self, hba):
        """Test cross-references and their table form."""
        references = hba.database_references()

        assert sorted(references) == ["EMBL", "PDB", "Pfam"]
        assert references["EMBL"][0].properties["molecule type"] == "mRNA"
        assert len(hba.database_references_table()) == 6

    def test_missing_metadata(self, entry_xml):
        """Test accessors return empty values when fields are missing."""
        sequence = ProxySequence.from_xml_string(entry_xml("<sequence>MVL</sequence>"))

        assert not sequence.accession
        assert sequence.accessions() == []
        assert sequence.protein_name() == ""
        assert sequence.aliases() == []
        assert sequence.gene_name() == ""
        assert sequence.organism_name() == ""
        assert sequence.keywords() == []
        assert sequence.database_references() == {}

    def test_repr(self, hba):
        assert repr(hba) == "ProxySequence('HBA_HUMAN', length=142)"


class TestBiopythonInterop:
    """Test cases for conversion to Biopython objects."""

    def test_to_seq(self, hba, hba_sequence):
        assert str(hba.to_seq()) == hba_sequence

    def test_to_seq_record(self, hba, hba_sequence):
        """Test identifiers, description and annotations."""
        record = hba.to_seq_record()

        assert record.id == "P69905"
        assert record.name == "HBA_HUMAN"
        assert record.description == "Hemoglobin subunit alpha"
        assert str(record.seq) == hba_sequence
        assert record.dbxrefs == ["EMBL:V00493", "PDB:1A00", "PDB:1A01", "Pfam:PF00042"]
        assert record.annotations["molecule_type"] == "protein"
        assert record.annotations["organism"] == "Homo sapiens"
        assert record.annotations["gene_name"] == "HBA1"
        assert record.annotations["keywords"] == ["Heme", "Iron", "Oxygen transport"]
