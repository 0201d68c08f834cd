#!/usr/bin/env python3
"""
Example: Building the sprinkler network

The following is demonstrated:
- Reading an XMLBIF file (variable-innermost table order)
- Declaring the same network by hand with text-style tables
  (variable-outermost order) and explicit rows
- Checking that both constructions give the same CPTs
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np

from bnet import (
    ExplicitRow,
    ExplicitRows,
    FlatTable,
    Network,
    TableOrder,
    Variable,
    ingest,
    read_xmlbif,
)
from bnet.logging_config import configure_logging

DATA = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "sprinkler.xml")


def build_by_hand() -> Network:
    net = Network("Sprinkler")
    for name in ("Cloudy", "Sprinkler", "Rain", "WetGrass"):
        net.add_variable(Variable(name, ["true", "false"]))

    ingest(net, "Cloudy", [], FlatTable([0.5, 0.5], TableOrder.BIF))
    # Variable outermost: P(S=true|C=true), P(S=true|C=false), P(S=false|...), ...
    ingest(net, "Sprinkler", ["Cloudy"], FlatTable([0.1, 0.5, 0.9, 0.5], TableOrder.BIF))
    ingest(
        net,
        "Rain",
        ["Cloudy"],
        ExplicitRows([ExplicitRow(["true"], [0.8, 0.2]), ExplicitRow(["false"], [0.2, 0.8])]),
    )
    ingest(
        net,
        "WetGrass",
        ["Sprinkler", "Rain"],
        FlatTable([0.99, 0.9, 0.9, 0, 0.01, 0.1, 0.1, 1], TableOrder.BIF),
    )
    return net


def main() -> None:
    configure_logging()

    from_file = read_xmlbif(DATA)
    by_hand = build_by_hand()
    print(from_file)
    print()

    for variable in from_file.topological_order():
        parents = list(from_file.parents_of(variable))
        a = from_file.cpt_for(variable).to_array(parents)
        b = by_hand.cpt_for(by_hand.require_variable(variable.name)).to_array(parents)
        same = "same" if np.array_equal(a, b) else "DIFFERENT"
        print(f"{variable.name:10s} {same}")
        print(from_file.cpt_for(variable))


if __name__ == "__main__":
    main()
