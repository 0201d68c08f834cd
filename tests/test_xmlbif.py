"""
Unit tests for the XMLBIF reader.
"""

from pathlib import Path

import pytest

from bnet.assignment import Assignment
from bnet.errors import (
    InvalidNumberError,
    MalformedTableLengthError,
    UndeclaredVariableError,
    XMLBIFFormatError,
)
from bnet.ingest import IngestConfig
from bnet.network import Network
from bnet.xmlbif import parse_xmlbif, read_xmlbif

SPRINKLER = Path(__file__).resolve().parents[1] / "examples" / "data" / "sprinkler.xml"


def _doc(body: str) -> str:
    return f'<?xml version="1.0"?>\n<BIF VERSION="0.3"><NETWORK><NAME>t</NAME>{body}</NETWORK></BIF>'


BOOL_VARS = """
<VARIABLE TYPE="nature"><NAME>A</NAME><OUTCOME>yes</OUTCOME><OUTCOME>no</OUTCOME></VARIABLE>
<VARIABLE TYPE="nature"><NAME>B</NAME><OUTCOME>yes</OUTCOME><OUTCOME>no</OUTCOME></VARIABLE>
"""


def _probability(net: Network, name: str, value: str, **given: str) -> float:
    variable = net.require_variable(name)
    evidence = Assignment((net.require_variable(k), v) for k, v in given.items())
    return net.cpt_for(variable).get(value, evidence)


class TestReadXMLBIF:
    """Reading complete documents."""

    def test_sprinkler_file(self) -> None:
        net = read_xmlbif(SPRINKLER)
        assert net.name == "Sprinkler"
        assert [v.name for v in net.variables] == ["Cloudy", "Sprinkler", "Rain", "WetGrass"]
        assert [p.name for p in net.parents_of(net.require_variable("WetGrass"))] == ["Sprinkler", "Rain"]

        assert _probability(net, "Cloudy", "true") == 0.5
        assert _probability(net, "Sprinkler", "true", Cloudy="true") == pytest.approx(0.1)
        assert _probability(net, "Rain", "false", Cloudy="false") == pytest.approx(0.8)
        assert _probability(net, "WetGrass", "true", Sprinkler="true", Rain="false") == pytest.approx(0.9)
        assert _probability(net, "WetGrass", "false", Sprinkler="false", Rain="false") == 1.0
        assert [v.name for v in net.topological_order()] == ["Cloudy", "Sprinkler", "Rain", "WetGrass"]

    def test_parse_from_text_with_definition_before_variable(self) -> None:
        doc = _doc(
            "<DEFINITION><FOR>B</FOR><GIVEN>A</GIVEN><TABLE>0.3 0.7 0.6 0.4</TABLE></DEFINITION>"
            + BOOL_VARS
            + "<DEFINITION><FOR>A</FOR><TABLE>0.25 0.75</TABLE></DEFINITION>"
        )
        net = parse_xmlbif(doc)
        assert _probability(net, "B", "no", A="yes") == pytest.approx(0.7)
        assert _probability(net, "B", "yes", A="no") == pytest.approx(0.6)
        assert _probability(net, "A", "no") == 0.75

    def test_legacy_probability_tag_and_cdata(self) -> None:
        doc = _doc(BOOL_VARS + "<PROBABILITY><FOR>A</FOR><TABLE><![CDATA[ 1 0 ]]></TABLE></PROBABILITY>")
        net = parse_xmlbif(doc.encode("utf-8"))
        assert _probability(net, "A", "yes") == 1.0

    def test_read_from_path(self, tmp_path: Path) -> None:
        path = tmp_path / "net.xml"
        path.write_text(_doc(BOOL_VARS + "<DEFINITION><FOR>A</FOR><TABLE>0.5 0.5</TABLE></DEFINITION>"))
        net = read_xmlbif(str(path))
        assert net.is_connected(net.require_variable("A"))
        assert not net.is_connected(net.require_variable("B"))

    def test_integer_tokens_follow_config(self) -> None:
        doc = _doc(BOOL_VARS + "<DEFINITION><FOR>A</FOR><TABLE>1 0</TABLE></DEFINITION>")
        with pytest.raises(InvalidNumberError, match="Integral"):
            parse_xmlbif(doc, config=IngestConfig(accept_integer_tokens=False))


class TestMalformedXMLBIF:
    """Documents that must be rejected."""

    def test_not_xml(self) -> None:
        with pytest.raises(XMLBIFFormatError, match="Malformed"):
            parse_xmlbif("<BIF><NETWORK>")

    def test_no_network(self) -> None:
        with pytest.raises(XMLBIFFormatError, match="NETWORK"):
            parse_xmlbif("<BIF VERSION='0.3'/>")

    def test_missing_for(self) -> None:
        with pytest.raises(XMLBIFFormatError, match="FOR"):
            parse_xmlbif(_doc(BOOL_VARS + "<DEFINITION><TABLE>0.5 0.5</TABLE></DEFINITION>"))

    def test_undeclared_given(self) -> None:
        doc = _doc(BOOL_VARS + "<DEFINITION><FOR>A</FOR><GIVEN>C</GIVEN><TABLE>0.5 0.5 0.5 0.5</TABLE></DEFINITION>")
        with pytest.raises(UndeclaredVariableError, match="'C'"):
            parse_xmlbif(doc)

    def test_short_table(self) -> None:
        doc = _doc(BOOL_VARS + "<DEFINITION><FOR>B</FOR><GIVEN>A</GIVEN><TABLE>0.5 0.5 0.5</TABLE></DEFINITION>")
        with pytest.raises(MalformedTableLengthError):
            parse_xmlbif(doc)

