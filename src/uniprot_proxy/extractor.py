"""Metadata and sequence extraction from parsed UniProt XML records."""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from .exceptions import AmbiguousElementError, DocumentNavigationError, ElementNotFoundError
from .models import AccessionID, DataSource, DBReference, FieldResult, FieldStatus
from .xml_helper import (
    get_attribute,
    get_text_content,
    select_elements,
    select_single_element,
)

logger = logging.getLogger(__name__)

# Plain-text alias leaves directly under <protein>
PROTEIN_NAME_LEAVES = ("cdAntigenName", "innName", "biotechName", "allergenName")


class RecordExtractor:
    """
    Pulls the sequence and metadata out of a UniProt ``<uniprot>`` document.

    Every ``extract_*`` method returns a :class:`FieldResult` telling apart a
    field that is simply missing (ABSENT) from one that is structurally wrong
    (MALFORMED). The plain accessors return only the value and fall back to an
    empty default in both cases, so metadata is always best-effort.
    """

    def _extract(self, field: str, record: Optional[ET.Element],
                 func: Callable[[ET.Element], Any], default: Any) -> FieldResult:
        if record is None:
            return FieldResult(default, FieldStatus.ABSENT, "no record")
        try:
            return FieldResult(func(record))
        except AmbiguousElementError as e:
            logger.warning(f"Problems while parsing {field} in UniProt XML: {e}")
            return FieldResult(default, FieldStatus.MALFORMED, str(e))
        except DocumentNavigationError as e:
            logger.debug(f"No {field} in UniProt XML: {e}")
            return FieldResult(default, FieldStatus.ABSENT, str(e))

    @staticmethod
    def _entry(record: ET.Element) -> ET.Element:
        return select_single_element(record, "entry")

    # Sequence

    def extract_sequence(self, record: Optional[ET.Element]) -> FieldResult:
        result = self._extract(
            "sequence", record,
            lambda r: get_text_content(select_single_element(self._entry(r), "sequence")),
            "",
        )
        if not result.ok:
            logger.error(
                f"Problems while parsing sequence in UniProt XML: {result.message}. "
                f"Sequence will be blank."
            )
        return result

    def sequence(self, record: Optional[ET.Element]) -> str:
        return self.extract_sequence(record).value

    # Identifiers

    def extract_name(self, record: Optional[ET.Element]) -> FieldResult:
        return self._extract(
            "entry name", record,
            lambda r: AccessionID(
                get_text_content(select_single_element(self._entry(r), "name")),
                DataSource.UNIPROT,
            ),
            AccessionID(),
        )

    def name(self, record: Optional[ET.Element]) -> AccessionID:
        return self.extract_name(record).value

    def extract_accessions(self, record: Optional[ET.Element]) -> FieldResult:
        return self._extract(
            "accessions", record,
            lambda r: [
                AccessionID(get_text_content(e), DataSource.UNIPROT)
                for e in select_elements(self._entry(r), "accession")
            ],
            [],
        )

    def accessions(self, record: Optional[ET.Element]) -> List[AccessionID]:
        return self.extract_accessions(record).value

    # Gene and organism

    @staticmethod
    def _preferred_name(parent: ET.Element, preferred_type: str) -> str:
        names = select_elements(parent, "name")
        for element in names:
            if get_attribute(element, "type") == preferred_type:
                return get_text_content(element)
        return get_text_content(names[0]) if names else ""

    def _gene_name(self, record: ET.Element) -> str:
        # Entries encoded by several genes (e.g. HBA1/HBA2) list one <gene> each
        genes = select_elements(self._entry(record), "gene")
        if not genes:
            raise ElementNotFoundError("<entry> has no <gene> element")
        return self._preferred_name(genes[0], "primary")

    def extract_gene_name(self, record: Optional[ET.Element]) -> FieldResult:
        return self._extract("gene name", record, self._gene_name, "")

    def gene_name(self, record: Optional[ET.Element]) -> str:
        return self.extract_gene_name(record).value

    def extract_organism_name(self, record: Optional[ET.Element]) -> FieldResult:
        return self._extract(
            "organism name", record,
            lambda r: self._preferred_name(
                select_single_element(self._entry(r), "organism"), "scientific"
            ),
            "",
        )

    def organism_name(self, record: Optional[ET.Element]) -> str:
        return self.extract_organism_name(record).value

    def extract_keywords(self, record: Optional[ET.Element]) -> FieldResult:
        return self._extract(
            "keywords", record,
            lambda r: [get_text_content(e) for e in select_elements(self._entry(r), "keyword")],
            [],
        )

    def keywords(self, record: Optional[ET.Element]) -> List[str]:
        return self.extract_keywords(record).value

    def _protein_name(self, record: ET.Element) -> str:
        protein = select_single_element(self._entry(record), "protein")
        recommended = select_elements(protein, "recommendedName")
        if recommended:
            return get_text_content(select_single_element(recommended[0], "fullName")).strip()

        # Unreviewed entries only carry submitted names
        submitted = select_elements(protein, "submittedName")
        if submitted:
            return get_text_content(select_single_element(submitted[0], "fullName")).strip()

        return ""

    def extract_protein_name(self, record: Optional[ET.Element]) -> FieldResult:
        return self._extract("protein name", record, self._protein_name, "")

    def protein_name(self, record: Optional[ET.Element]) -> str:
        return self.extract_protein_name(record).value

    # Aliases

    @staticmethod
    def _add_alias(aliases: List[str], text: str) -> None:
        text = text.strip()
        if text:
            aliases.append(text)

    def _aliases_from_name(self, aliases: List[str], element: ET.Element) -> None:
        """fullName (mandatory) followed by any shortName of a name element."""
        self._add_alias(aliases, get_text_content(select_single_element(element, "fullName")))
        for short_name in select_elements(element, "shortName"):
            self._add_alias(aliases, get_text_content(short_name))

    def _aliases_from_name_group(self, aliases: List[str], element: ET.Element) -> None:
        for tag in ("alternativeName", "recommendedName"):
            for name_element in select_elements(element, tag):
                self._aliases_from_name(aliases, name_element)

    def _protein_aliases(self, record: ET.Element) -> List[str]:
        protein = select_single_element(self._entry(record), "protein")
        aliases: List[str] = []
        self._aliases_from_name_group(aliases, protein)
        for tag in ("component", "domain"):
            for element in select_elements(protein, tag):
                self._aliases_from_name_group(aliases, element)
        for element in select_elements(protein, "submittedName"):
            self._aliases_from_name(aliases, element)
        for tag in PROTEIN_NAME_LEAVES:
            for element in select_elements(protein, tag):
                self._add_alias(aliases, get_text_content(element))
        return aliases

    def extract_protein_aliases(self, record: Optional[ET.Element]) -> FieldResult:
        return self._extract("protein aliases", record, self._protein_aliases, [])

    def protein_aliases(self, record: Optional[ET.Element]) -> List[str]:
        return self.extract_protein_aliases(record).value

    def extract_gene_aliases(self, record: Optional[ET.Element]) -> FieldResult:
        return self._extract(
            "gene aliases", record,
            lambda r: [
                get_text_content(name)
                for gene in select_elements(self._entry(r), "gene")
                for name in select_elements(gene, "name")
            ],
            [],
        )

    def gene_aliases(self, record: Optional[ET.Element]) -> List[str]:
        return self.extract_gene_aliases(record).value

    # Cross-references

    def _database_references(self, record: ET.Element) -> Dict[str, List[DBReference]]:
        references: Dict[str, List[DBReference]] = {}
        for element in select_elements(self._entry(record), "dbReference"):
            reference = DBReference(get_attribute(element, "type"), get_attribute(element, "id"))
            for prop in select_elements(element, "property"):
                reference.add_property(get_attribute(prop, "type"), get_attribute(prop, "value"))
            references.setdefault(reference.type, []).append(reference)
        return references

    def extract_database_references(self, record: Optional[ET.Element]) -> FieldResult:
        return self._extract("db references", record, self._database_references, {})

    def database_references(self, record: Optional[ET.Element]) -> Dict[str, List[DBReference]]:
        return self.extract_database_references(record).value

    def database_references_table(self, record: Optional[ET.Element]) -> pd.DataFrame:
        """Cross-references flattened to one row per property.

        References without properties get a single row with empty
        ``property``/``value`` cells.
        """
        rows = []
        for ref_type, references in self.database_references(record).items():
            for reference in references:
                if not reference.properties:
                    rows.append({'type': ref_type, 'id': reference.id, 'property': '', 'value': ''})
                for key, value in reference.properties.items():
                    rows.append({'type': ref_type, 'id': reference.id, 'property': key, 'value': value})
        return pd.DataFrame(rows, columns=['type', 'id', 'property', 'value'])
