"""
Conditional probability tables.

A CPT holds one `Distribution` (row) per combination of parent values, keyed
by the `Assignment` of those parents. Priors are CPTs with a single row keyed
by the empty assignment.
"""

from __future__ import annotations

from itertools import product
from typing import List, Optional, Sequence, Tuple

import numpy as np

from bnet.assignment import Assignment, Distribution
from bnet.errors import NoMatchingRowError
from bnet.types import ValueLike, Variable


class ConditionalProbabilityTable:
    """
    Sparse table of P(variable | parents).

    Rows are found by subset matching: a row applies to a query assignment if
    every binding in the row's key is present in the query. The query may
    therefore carry values for variables the table does not depend on.

    Row lookup is a linear scan, so `get` and `set` cost O(rows). Row counts
    are bounded by the product of the parent domain sizes, which is small for
    the models this package targets. An index keyed by the query's projection
    onto the parent set could replace `_find_row` without changing `get`/`set`.
    """

    def __init__(self, variable: Variable) -> None:
        self.variable = variable
        self._rows: List[Tuple[Assignment, Distribution]] = []

    def _find_row(self, assignment: Assignment) -> Optional[Distribution]:
        for key, row in self._rows:
            if assignment.contains_all(key):
                return row
        return None

    def set(self, value: ValueLike, assignment: Assignment, probability: float) -> None:
        """
        Set P(variable=value | assignment) to `probability`.

        If no stored row is consistent with `assignment`, a new row keyed by a
        copy of exactly `assignment` is added. Callers pass only the parent
        bindings; no projection is applied here.

        Args:
            value: Value (or label) of this table's variable.
            assignment: Parent bindings identifying the row.
            probability: Probability to store.

        Raises:
            UnknownValueError: If `value` is not in the variable's domain. The
                table is left unchanged.
        """
        row = self._find_row(assignment)
        if row is not None:
            row.put(value, probability)
            return
        # A row is only added once its first cell is written.
        row = Distribution(self.variable)
        row.put(value, probability)
        self._rows.append((assignment.copy(), row))

    def get(self, value: ValueLike, assignment: Assignment) -> float:
        """
        Return P(variable=value | assignment).

        Raises:
            NoMatchingRowError: If no stored row is consistent with `assignment`.
            ValueNotSetError: If the matching row has no entry for `value`.
        """
        row = self._find_row(assignment)
        if row is None:
            raise NoMatchingRowError(
                f"No row of P({self.variable.name} | ...) matches {assignment}"
            )
        return row.get(value)

    def row(self, assignment: Assignment) -> Distribution:
        """Return the row consistent with `assignment`."""
        row = self._find_row(assignment)
        if row is None:
            raise NoMatchingRowError(
                f"No row of P({self.variable.name} | ...) matches {assignment}"
            )
        return row

    def rows(self) -> List[Tuple[Assignment, Distribution]]:
        return list(self._rows)

    def copy(self) -> "ConditionalProbabilityTable":
        """
        Return a table with copied Distributions and shared row keys.

        Keys are never mutated once stored, so sharing them is safe; changing a
        probability in the copy leaves this table untouched.
        """
        out = ConditionalProbabilityTable(self.variable)
        out._rows = [(key, row.copy()) for key, row in self._rows]
        return out

    def to_array(self, parents: Sequence[Variable] = ()) -> np.ndarray:
        """
        Return the table as a dense array.

        The array has shape ``(len(P1.domain), ..., len(Pk.domain),
        len(variable.domain))`` with axes in the order of `parents`, followed
        by this table's variable on the last axis.

        Raises:
            NoMatchingRowError: If some parent combination has no row.
            ValueNotSetError: If some cell was never set.
        """
        parents = list(parents)
        shape = tuple(len(p.domain) for p in parents) + (len(self.variable.domain),)
        out = np.empty(shape, dtype=float)
        for combo in product(*(range(len(p.domain)) for p in parents)):
            query = Assignment(
                (p, p.domain.values[i]) for p, i in zip(parents, combo)
            )
            row = self.row(query)
            for j, v in enumerate(self.variable.domain):
                out[combo + (j,)] = row.get(v)
        return out

    def __len__(self) -> int:
        return len(self._rows)

    def __str__(self) -> str:
        lines = [f"P({self.variable.name} | ...):"]
        for key, row in self._rows:
            lines.append(f"  {key} -> {row}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ConditionalProbabilityTable({self.variable.name!r}, rows={len(self._rows)})"


CPT = ConditionalProbabilityTable
