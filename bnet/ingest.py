"""
Populate CPTs from probability declarations.

A probability declaration names a variable, an ordered list of parents and a
body. Flat tables list every probability in a fixed counting order:

  - `TableOrder.VARIABLE_OUTER` (text "table" form): the variable's own
    values vary slowest, then the first parent, ..., the last parent fastest.
  - `TableOrder.VARIABLE_INNER` (XMLBIF TABLE element): the first parent
    varies slowest, ..., the last parent, then the variable's own values
    fastest.

Example: P(A | B, C) with |A| = 3, |B| = 2, |C| = 4. Under VARIABLE_INNER the
sequence starts p(A1|B1 C1), p(A2|B1 C1), p(A3|B1 C1), p(A1|B1 C2), ...; under
VARIABLE_OUTER it starts p(A1|B1 C1), p(A1|B1 C2), p(A1|B1 C3), p(A1|B1 C4),
p(A1|B2 C1), ...

Both orders are walked by the same routine over a list of dimensions; only
the position of the variable's own dimension differs.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from functools import reduce
from operator import mul
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from bnet.assignment import Assignment
from bnet.cpt import ConditionalProbabilityTable
from bnet.errors import (
    InvalidDeclarationError,
    InvalidNumberError,
    MalformedTableLengthError,
    UnsupportedFeatureError,
)
from bnet.network import Network
from bnet.types import Value, Variable

logger = logging.getLogger(__name__)

NumberToken = Union[int, float, str]

_INTEGER_TOKEN = re.compile(r"^[+-]?\d+$")


class TableOrder(Enum):
    """Where the declared variable's own dimension sits in a flat table."""

    VARIABLE_OUTER = "variable_outer"
    VARIABLE_INNER = "variable_inner"

    # Interchange-format aliases.
    BIF = "variable_outer"
    XMLBIF = "variable_inner"


@dataclass(frozen=True)
class ExplicitRow:
    """One row given as parent labels (positional) and per-value probabilities."""

    parent_values: Tuple[str, ...]
    probabilities: Tuple[NumberToken, ...]

    def __init__(self, parent_values: Sequence[str], probabilities: Sequence[NumberToken]) -> None:
        object.__setattr__(self, "parent_values", tuple(str(v) for v in parent_values))
        object.__setattr__(self, "probabilities", tuple(probabilities))


@dataclass(frozen=True)
class ExplicitRows:
    rows: Tuple[ExplicitRow, ...]
    kind: str = "explicit_rows"

    def __init__(self, rows: Sequence[ExplicitRow]) -> None:
        object.__setattr__(self, "rows", tuple(rows))
        object.__setattr__(self, "kind", "explicit_rows")


@dataclass(frozen=True)
class FlatTable:
    values: Tuple[NumberToken, ...]
    order: TableOrder
    kind: str = "flat_table"

    def __init__(self, values: Sequence[NumberToken], order: TableOrder) -> None:
        object.__setattr__(self, "values", tuple(values))
        object.__setattr__(self, "order", TableOrder(order))
        object.__setattr__(self, "kind", "flat_table")


@dataclass(frozen=True)
class DefaultTable:
    """A default row applied to unlisted parent combinations (not supported)."""

    values: Tuple[NumberToken, ...]
    kind: str = "default_table"

    def __init__(self, values: Sequence[NumberToken]) -> None:
        object.__setattr__(self, "values", tuple(values))
        object.__setattr__(self, "kind", "default_table")


TableBody = Union[ExplicitRows, FlatTable, DefaultTable]


@dataclass(frozen=True)
class IngestConfig:
    """
    Options for reading probability declarations.

    Attributes:
        accept_integer_tokens: Accept integral tokens such as ``1`` or ``"0"``
            as probabilities. The interchange grammars require a fractional
            part; most real files ignore that rule.
        replace_existing: Allow a second declaration for a variable that
            already has a CPT, replacing it.
    """

    accept_integer_tokens: bool = True
    replace_existing: bool = False


def to_probability(token: NumberToken, *, accept_integer_tokens: bool = True) -> float:
    """
    Convert a numeric token to a float probability.

    Args:
        token: int, float or numeric string.
        accept_integer_tokens: If False, integral tokens are rejected.

    Returns:
        The token as a float.

    Raises:
        InvalidNumberError: If the token is not a number, is a bool, is
            integral while integral tokens are not accepted, or is not a
            finite value in [0, 1].
    """
    if isinstance(token, bool):
        raise InvalidNumberError(f"Boolean {token!r} is not a probability")
    if isinstance(token, int):
        integral = True
    elif isinstance(token, float):
        integral = False
    elif isinstance(token, str):
        integral = bool(_INTEGER_TOKEN.match(token.strip()))
    else:
        raise InvalidNumberError(f"Unsupported probability token {token!r}")
    if integral and not accept_integer_tokens:
        raise InvalidNumberError(f"Integral token {token!r} where a real number is required")
    try:
        probability = float(token)
    except ValueError:
        raise InvalidNumberError(f"Token {token!r} is not a number") from None
    if not math.isfinite(probability) or not 0.0 <= probability <= 1.0:
        raise InvalidNumberError(f"Token {token!r} is not a probability in [0, 1]")
    return probability


def table_size(dimensions: Sequence[Variable]) -> int:
    return int(reduce(mul, (len(d.domain) for d in dimensions), 1))


class TableIngestor:
    """
    Build CPTs from probability declarations and connect them into a network.

    The network is passed in explicitly; an ingestor never builds against
    shared global state.
    """

    def __init__(self, network: Network, config: Optional[IngestConfig] = None) -> None:
        self.network = network
        self.config = config or IngestConfig()
        self._handlers: Dict[
            str,
            Callable[[ConditionalProbabilityTable, Tuple[Variable, ...], TableBody], None],
        ] = {
            "explicit_rows": self._fill_explicit_rows,
            "flat_table": self._fill_flat_table,
            "default_table": self._fill_default_table,
        }

    def ingest(
        self,
        variable_name: str,
        parent_names: Sequence[str],
        body: TableBody,
    ) -> ConditionalProbabilityTable:
        """
        Build the CPT for one declaration and connect it into the network.

        Every name is resolved before any table is read. If anything fails,
        the partially built table is discarded and the network is unchanged.

        Args:
            variable_name: Name of the variable the declaration is for.
            parent_names: Parent names in declaration order.
            body: One of ExplicitRows, FlatTable or DefaultTable.

        Returns:
            The CPT now attached to the variable.

        Raises:
            UndeclaredVariableError: If a name is not registered.
            InvalidDeclarationError: On duplicate parents, a self-parent, a
                repeated declaration or malformed explicit rows.
            MalformedTableLengthError: If a number sequence has the wrong size.
            UnsupportedFeatureError: For default tables.
            CyclicDependencyError: If the new edges would close a cycle.
        """
        variable = self.network.require_variable(variable_name)
        parents = tuple(self.network.require_variable(n) for n in parent_names)
        self._check_parents(variable, parents)

        handler = self._handlers.get(getattr(body, "kind", None))
        if handler is None:
            raise InvalidDeclarationError(f"Unknown table body {body!r}")

        cpt = ConditionalProbabilityTable(variable)
        handler(cpt, parents, body)
        self.network.connect(variable, parents, cpt)
        logger.debug("Ingested %s body for %s (%d rows)", body.kind, variable.name, len(cpt))
        return cpt

    def _check_parents(self, variable: Variable, parents: Tuple[Variable, ...]) -> None:
        seen = set()
        for parent in parents:
            if parent == variable:
                raise InvalidDeclarationError(f"Variable {variable.name!r} is listed as its own parent")
            if parent in seen:
                raise InvalidDeclarationError(
                    f"Parent {parent.name!r} is listed twice for {variable.name!r}"
                )
            seen.add(parent)
        if self.network.is_connected(variable) and not self.config.replace_existing:
            raise InvalidDeclarationError(f"Variable {variable.name!r} already has a CPT")

    def _number(self, token: NumberToken) -> float:
        return to_probability(token, accept_integer_tokens=self.config.accept_integer_tokens)

    def _fill_flat_table(
        self,
        cpt: ConditionalProbabilityTable,
        parents: Tuple[Variable, ...],
        body: FlatTable,
    ) -> None:
        fill_flat_table(cpt, parents, body.values, body.order, number=self._number)

    def _fill_explicit_rows(
        self,
        cpt: ConditionalProbabilityTable,
        parents: Tuple[Variable, ...],
        body: ExplicitRows,
    ) -> None:
        variable = cpt.variable
        for row in body.rows:
            if len(row.parent_values) != len(parents):
                raise InvalidDeclarationError(
                    f"Row {list(row.parent_values)} for {variable.name!r} gives "
                    f"{len(row.parent_values)} parent values, expected {len(parents)}"
                )
            if len(row.probabilities) != len(variable.domain):
                raise MalformedTableLengthError(
                    f"Row {list(row.parent_values)} for {variable.name!r} has "
                    f"{len(row.probabilities)} probabilities, expected {len(variable.domain)}",
                    expected=len(variable.domain),
                    actual=len(row.probabilities),
                )
            assignment = Assignment(zip(parents, row.parent_values))
            for value, token in zip(variable.domain, row.probabilities):
                cpt.set(value, assignment, self._number(token))

    def _fill_default_table(
        self,
        cpt: ConditionalProbabilityTable,
        parents: Tuple[Variable, ...],
        body: DefaultTable,
    ) -> None:
        raise UnsupportedFeatureError(
            f"Default probability tables are not supported (declaration for {cpt.variable.name!r})"
        )


def fill_flat_table(
    cpt: ConditionalProbabilityTable,
    parents: Sequence[Variable],
    values: Sequence[NumberToken],
    order: TableOrder,
    *,
    number: Callable[[NumberToken], float] = to_probability,
) -> None:
    """
    Write a flat number sequence into `cpt` following `order`.

    The dimension list is ``[variable] + parents`` for VARIABLE_OUTER and
    ``parents + [variable]`` for VARIABLE_INNER, outermost first. The length
    is checked before any cell is written.

    Raises:
        InvalidDeclarationError: If a parent is the table's own variable.
        MalformedTableLengthError: If ``len(values)`` is not the product of
            the dimension sizes.
    """
    variable = cpt.variable
    parents = list(parents)
    if variable in parents:
        raise InvalidDeclarationError(f"Variable {variable.name!r} is listed as its own parent")
    if TableOrder(order) is TableOrder.VARIABLE_OUTER:
        own_depth = 0
        dimensions = [variable] + parents
    else:
        own_depth = len(parents)
        dimensions = parents + [variable]

    expected = table_size(dimensions)
    if len(values) != expected:
        names = ", ".join(d.name for d in dimensions)
        raise MalformedTableLengthError(
            f"Table for {variable.name!r} over ({names}) needs {expected} numbers, got {len(values)}",
            expected=expected,
            actual=len(values),
        )

    numbers = iter(values)
    _walk(cpt, dimensions, own_depth, 0, Assignment(), None, numbers, number)


def _walk(
    cpt: ConditionalProbabilityTable,
    dimensions: List[Variable],
    own_depth: int,
    depth: int,
    assignment: Assignment,
    own_value: Optional[Value],
    numbers: Iterator[NumberToken],
    number: Callable[[NumberToken], float],
) -> None:
    if depth == len(dimensions):
        cpt.set(own_value, assignment, number(next(numbers)))
        return
    dim = dimensions[depth]
    for value in dim.domain:
        if depth == own_depth:
            _walk(cpt, dimensions, own_depth, depth + 1, assignment, value, numbers, number)
            continue
        assignment.put(dim, value)
        try:
            _walk(cpt, dimensions, own_depth, depth + 1, assignment, own_value, numbers, number)
        finally:
            assignment.remove(dim)


def ingest(
    network: Network,
    variable_name: str,
    parent_names: Sequence[str],
    body: TableBody,
    config: Optional[IngestConfig] = None,
) -> ConditionalProbabilityTable:
    """Ingest one probability declaration into `network`; see `TableIngestor.ingest`."""
    return TableIngestor(network, config).ingest(variable_name, parent_names, body)
