"""
Reader for XMLBIF 0.3 documents.

XMLBIF does not require variables to be declared before the definitions that
use them, so every VARIABLE element is registered first and DEFINITION
elements are ingested afterwards. Tag names are upper case, as in the format
description. TABLE bodies list probabilities with the GIVEN variables first
and the FOR variable last, i.e. `TableOrder.VARIABLE_INNER`.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional, Union

from lxml import etree

from bnet.errors import XMLBIFFormatError
from bnet.ingest import FlatTable, IngestConfig, TableIngestor, TableOrder
from bnet.network import Network
from bnet.types import Variable

logger = logging.getLogger(__name__)

# Some older files use PROBABILITY in place of DEFINITION.
_DEFINITION_TAGS = ("DEFINITION", "PROBABILITY")


def _child(elt: etree._Element, tag: str) -> etree._Element:
    found = elt.find(tag)
    if found is None:
        raise XMLBIFFormatError(f"<{elt.tag}> has no <{tag}> child (line {elt.sourceline})")
    return found


def _text(elt: etree._Element) -> str:
    # itertext() concatenates text and CDATA content.
    return "".join(elt.itertext()).strip()


def _children_text(elt: etree._Element, tag: str) -> List[str]:
    return [_text(child) for child in elt.findall(tag)]


def parse_xmlbif(
    source: Union[str, bytes],
    *,
    config: Optional[IngestConfig] = None,
) -> Network:
    """
    Build a Network from XMLBIF text.

    Args:
        source: Document contents.
        config: Ingestion options.

    Returns:
        The populated network.

    Raises:
        XMLBIFFormatError: If the document is not well formed or misses a
            required element.
        BayesNetError: For any declaration error found while building.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    parser = etree.XMLParser(remove_comments=True, resolve_entities=False)
    try:
        root = etree.fromstring(source, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise XMLBIFFormatError(f"Malformed XMLBIF document: {exc}") from exc
    return _build_network(root, config)


def read_xmlbif(path: Union[str, "os.PathLike[str]"], *, config: Optional[IngestConfig] = None) -> Network:
    """Read an XMLBIF file from `path`; see `parse_xmlbif`."""
    with open(path, "rb") as fh:
        data = fh.read()
    logger.info("Reading XMLBIF network from %s", os.fspath(path))
    return parse_xmlbif(data, config=config)


def _build_network(root: etree._Element, config: Optional[IngestConfig]) -> Network:
    network_elt = root if root.tag == "NETWORK" else root.find("NETWORK")
    if network_elt is None:
        raise XMLBIFFormatError("XMLBIF document has no <NETWORK> element")

    name_elt = network_elt.find("NAME")
    network = Network(_text(name_elt) if name_elt is not None else None)

    for var_elt in network_elt.iter("VARIABLE"):
        name = _text(_child(var_elt, "NAME"))
        outcomes = _children_text(var_elt, "OUTCOME")
        network.add_variable(Variable(name, outcomes))

    ingestor = TableIngestor(network, config)
    for def_elt in network_elt.iter(*_DEFINITION_TAGS):
        for_name = _text(_child(def_elt, "FOR"))
        givens = _children_text(def_elt, "GIVEN")
        tokens = _text(_child(def_elt, "TABLE")).split()
        ingestor.ingest(for_name, givens, FlatTable(tokens, TableOrder.VARIABLE_INNER))

    logger.info(
        "Loaded network %s with %d variables",
        network.name or "<unnamed>",
        len(network),
    )
    return network
