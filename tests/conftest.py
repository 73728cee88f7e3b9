"""Shared fixtures: a UniProt XML record and HTTP test doubles."""

import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest

from uniprot_proxy.config import Config
from uniprot_proxy.xml_helper import parse_record, strip_default_namespace

HBA_SEQUENCE = (
    "MVLSPADKTNVKAAWGKVGAHAGEYGAEALERMFLSFPTTKTYFPHFDLSHGSAQVKGHG"
    "KKVADALTNAVAHVDDMPNALSALSDLHAHKLRVDPVNFKLLSHCLLVTLAAHLPAEFTP"
    "AVHASLDKFLASVSTVLTSKYR"
)

HBA_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<uniprot xmlns="http://uniprot.org/uniprot" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xsi:schemaLocation="http://uniprot.org/uniprot http://www.uniprot.org/support/docs/uniprot.xsd">
<entry dataset="Swiss-Prot" created="1986-07-21" modified="2020-02-26" version="208">
  <accession>P69905</accession>
  <accession>P01922</accession>
  <accession>Q1HDT5</accession>
  <name>HBA_HUMAN</name>
  <protein>
    <recommendedName>
      <fullName>Hemoglobin subunit alpha</fullName>
    </recommendedName>
    <alternativeName>
      <fullName>Alpha-globin</fullName>
    </alternativeName>
    <alternativeName>
      <fullName>Hemoglobin alpha chain</fullName>
      <shortName>Hb-alpha</shortName>
    </alternativeName>
    <component>
      <recommendedName>
        <fullName evidence="3">Hemopressin</fullName>
      </recommendedName>
    </component>
  </protein>
  <gene>
    <name type="primary">HBA1</name>
    <name type="synonym">HBA</name>
  </gene>
  <gene>
    <name type="primary">HBA2</name>
  </gene>
  <organism>
    <name type="scientific">Homo sapiens</name>
    <name type="common">Human</name>
    <dbReference type="NCBI Taxonomy" id="9606"/>
  </organism>
  <dbReference type="EMBL" id="V00493">
    <property type="protein sequence ID" value="CAA23752.1"/>
    <property type="molecule type" value="mRNA"/>
  </dbReference>
  <dbReference type="PDB" id="1A00">
    <property type="method" value="X-ray"/>
    <property type="resolution" value="2.00 A"/>
  </dbReference>
  <dbReference type="PDB" id="1A01">
    <property type="method" value="X-ray"/>
  </dbReference>
  <dbReference type="Pfam" id="PF00042"/>
  <keyword id="KW-0349">Heme</keyword>
  <keyword id="KW-0408">Iron</keyword>
  <keyword id="KW-0561">Oxygen transport</keyword>
  <sequence length="142" mass="15258" checksum="15E13666573BBBAE" modified="2007-01-23" version="2">
MVLSPADKTNVKAAWGKVGAHAGEYGAEALERMFLSFPTTKTYFPHFDLSHGSAQVKGHG
KKVADALTNAVAHVDDMPNALSALSDLHAHKLRVDPVNFKLLSHCLLVTLAAHLPAEFTP
AVHASLDKFLASVSTVLTSKYR
</sequence>
</entry>
<copyright>
Copyrighted by the UniProt Consortium, see https://www.uniprot.org/terms
</copyright>
</uniprot>
"""


@pytest.fixture
def hba_sequence():
    """The 142 residues of HBA_HUMAN, unwrapped."""
    return HBA_SEQUENCE


@pytest.fixture
def sample_xml():
    """HBA_HUMAN as served by UniProt (default namespace declared)."""
    return HBA_XML


@pytest.fixture
def stripped_xml():
    """HBA_HUMAN as returned by the fetcher."""
    return strip_default_namespace(HBA_XML)


@pytest.fixture
def sample_record(stripped_xml):
    """Parsed HBA_HUMAN document element."""
    return parse_record(stripped_xml)


@pytest.fixture
def entry_xml():
    """Build a minimal record around the given ``<entry>`` body."""
    def build(body: str) -> bytes:
        return f"<uniprot><entry>{body}</entry></uniprot>".encode('utf-8')
    return build


@pytest.fixture
def temp_cache_dir():
    """Create a temporary cache directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def populated_cache_dir(temp_cache_dir):
    """Cache directory already holding the HBA_HUMAN record."""
    (temp_cache_dir / "P69905.xml").write_bytes(HBA_XML)
    return temp_cache_dir


@pytest.fixture
def config():
    """Default configuration without a cache."""
    return Config.default()


@pytest.fixture
def response_factory():
    """Build mock ``requests.Response`` objects."""
    def build(status_code=200, content=b"", headers=None):
        response = Mock()
        response.status_code = status_code
        response.content = content
        response.headers = headers or {}
        return response
    return build


@pytest.fixture
def mock_session():
    """Mock ``requests.Session``; set ``get.side_effect`` or ``get.return_value``."""
    return Mock()
