"""
Discrete Bayesian network construction.

Variables with finite ordered domains are registered in a `Network`, and each
variable's conditional probability table is filled from a probability
declaration by `ingest`. Flat tables may list their numbers with the
variable's own values outermost (`TableOrder.VARIABLE_OUTER`, the text "table"
form) or innermost (`TableOrder.VARIABLE_INNER`, the XMLBIF TABLE element).
"""

from bnet.assignment import Assignment, Distribution
from bnet.cpt import CPT, ConditionalProbabilityTable
from bnet.errors import (
    BayesNetError,
    CyclicDependencyError,
    DuplicateVariableNameError,
    InvalidDeclarationError,
    InvalidNumberError,
    MalformedTableLengthError,
    NoMatchingRowError,
    UndeclaredVariableError,
    UnknownValueError,
    UnsupportedFeatureError,
    ValueNotSetError,
    XMLBIFFormatError,
)
from bnet.ingest import (
    DefaultTable,
    ExplicitRow,
    ExplicitRows,
    FlatTable,
    IngestConfig,
    TableIngestor,
    TableOrder,
    ingest,
)
from bnet.network import Network
from bnet.types import Domain, Value, Variable
from bnet.xmlbif import parse_xmlbif, read_xmlbif

__version__ = "0.1.0"

__all__ = [
    "Assignment",
    "BayesNetError",
    "CPT",
    "ConditionalProbabilityTable",
    "CyclicDependencyError",
    "DefaultTable",
    "Distribution",
    "Domain",
    "DuplicateVariableNameError",
    "ExplicitRow",
    "ExplicitRows",
    "FlatTable",
    "IngestConfig",
    "InvalidDeclarationError",
    "InvalidNumberError",
    "MalformedTableLengthError",
    "Network",
    "NoMatchingRowError",
    "TableIngestor",
    "TableOrder",
    "UndeclaredVariableError",
    "UnknownValueError",
    "UnsupportedFeatureError",
    "Value",
    "ValueNotSetError",
    "Variable",
    "XMLBIFFormatError",
    "ingest",
    "parse_xmlbif",
    "read_xmlbif",
]
