"""
Network registry: variables, their parent sets and their CPTs.

The parent structure is kept as a `networkx.DiGraph` with an edge
``parent -> child`` for every declared dependency. `connect` refuses any edge
set that would make the graph cyclic, so the network is a DAG at all times.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from bnet.cpt import ConditionalProbabilityTable
from bnet.errors import (
    CyclicDependencyError,
    DuplicateVariableNameError,
    InvalidDeclarationError,
    UndeclaredVariableError,
)
from bnet.types import Variable

try:
    import networkx as nx
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "Network structure requires networkx. Install with: pip install networkx"
    ) from exc

logger = logging.getLogger(__name__)


class Network:
    """
    A discrete Bayesian network under construction.

    Variables are registered one at a time with `add_variable`; each variable
    is then given its parents and CPT with `connect`. Variables are kept in
    declaration order.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name
        self._variables: Dict[str, Variable] = {}
        self._parents: Dict[Variable, Tuple[Variable, ...]] = {}
        self._cpts: Dict[Variable, ConditionalProbabilityTable] = {}
        self._graph = nx.DiGraph()

    def add_variable(self, variable: Variable) -> Variable:
        """
        Register `variable`.

        Raises:
            DuplicateVariableNameError: If the name is already registered.
        """
        if variable.name in self._variables:
            raise DuplicateVariableNameError(variable.name)
        self._variables[variable.name] = variable
        self._graph.add_node(variable.name)
        logger.debug("Declared variable %s with %d values", variable.name, len(variable.domain))
        return variable

    def get_variable_by_name(self, name: str) -> Optional[Variable]:
        return self._variables.get(str(name))

    def require_variable(self, name: str) -> Variable:
        """
        Return the variable called `name`.

        Raises:
            UndeclaredVariableError: If no such variable is registered.
        """
        variable = self._variables.get(str(name))
        if variable is None:
            raise UndeclaredVariableError(str(name))
        return variable

    def _registered(self, variable: Variable) -> Variable:
        registered = self._variables.get(variable.name)
        if registered is None:
            raise UndeclaredVariableError(variable.name)
        if registered is not variable and registered.domain != variable.domain:
            raise InvalidDeclarationError(
                f"Variable {variable.name!r} with domain {list(variable.domain.labels)} "
                f"does not match the declared domain {list(registered.domain.labels)}"
            )
        return registered

    def connect(
        self,
        variable: Variable,
        parents: Iterable[Variable],
        cpt: ConditionalProbabilityTable,
    ) -> None:
        """
        Record `parents` as the parent set of `variable` and `cpt` as its table.

        A variable that is already connected has its parents and table
        replaced. The network is left unchanged if any check fails.

        Args:
            variable: Registered variable the CPT belongs to.
            parents: Registered parent variables, in declaration order.
            cpt: Table for `variable` given `parents`.

        Raises:
            UndeclaredVariableError: If `variable` or a parent is not registered.
            CyclicDependencyError: If a parent is `variable` itself or depends on it.
            InvalidDeclarationError: If `cpt` belongs to a different variable, or
                if `variable` or a parent has a different domain from the
                registered variable of that name.
        """
        variable = self._registered(variable)
        parents = tuple(self._registered(p) for p in parents)
        if cpt.variable != variable or cpt.variable.domain != variable.domain:
            raise InvalidDeclarationError(
                f"CPT is for {cpt.variable.name!r}, cannot attach it to {variable.name!r}"
            )

        for parent in parents:
            if parent == variable:
                raise CyclicDependencyError(f"Variable {variable.name!r} cannot be its own parent")
            if nx.has_path(self._graph, variable.name, parent.name):
                raise CyclicDependencyError(
                    f"Connecting {parent.name!r} -> {variable.name!r} would create a cycle"
                )

        old = self._parents.get(variable, ())
        self._graph.remove_edges_from((p.name, variable.name) for p in old)
        self._graph.add_edges_from((p.name, variable.name) for p in parents)
        self._parents[variable] = parents
        self._cpts[variable] = cpt
        logger.debug(
            "Connected %s given [%s] (%d rows)",
            variable.name,
            ", ".join(p.name for p in parents),
            len(cpt),
        )

    @property
    def variables(self) -> List[Variable]:
        return list(self._variables.values())

    def parents_of(self, variable: Variable) -> Tuple[Variable, ...]:
        return self._parents.get(variable, ())

    def children_of(self, variable: Variable) -> List[Variable]:
        names = set(self._graph.successors(variable.name))
        return [v for v in self._variables.values() if v.name in names]

    def cpt_for(self, variable: Variable) -> Optional[ConditionalProbabilityTable]:
        return self._cpts.get(variable)

    def is_connected(self, variable: Variable) -> bool:
        return variable in self._cpts

    def topological_order(self) -> List[Variable]:
        """
        Return variables with every parent before its children.

        Ties are broken by declaration order.
        """
        position = {name: i for i, name in enumerate(self._variables)}
        names = nx.lexicographical_topological_sort(self._graph, key=lambda n: position[n])
        return [self._variables[n] for n in names]

    def as_graph(self) -> nx.DiGraph:
        """Return a copy of the parent graph (nodes are variable names)."""
        return self._graph.copy()

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Variable):
            return item.name in self._variables
        return item in self._variables

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._variables.values())

    def __len__(self) -> int:
        return len(self._variables)

    def __str__(self) -> str:
        lines = [f"Network {self.name or '<unnamed>'}:"]
        for variable in self._variables.values():
            parents = ", ".join(p.name for p in self.parents_of(variable))
            lines.append(f"  {variable.name} {list(variable.domain.labels)} | [{parents}]")
        return "\n".join(lines)
