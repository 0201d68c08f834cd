"""
Partial assignments and single-variable distributions.

An `Assignment` maps some variables to values. It is the key of a CPT row and
the evidence passed to CPT lookups. A `Distribution` maps the values of one
variable to probabilities; it is one row of a CPT.
"""

from __future__ import annotations

from typing import Dict, ItemsView, Iterable, Iterator, Optional, Tuple

from bnet.errors import ValueNotSetError
from bnet.types import Value, ValueLike, Variable

_MISSING = object()


class Assignment:
    """
    Partial mapping from variables to values.

    Equality and containment ignore insertion order. Working assignments are
    mutated in place while tables are enumerated; anything stored for later
    use should be a `copy()`.
    """

    def __init__(self, pairs: Optional[Iterable[Tuple[Variable, ValueLike]]] = None) -> None:
        self._map: Dict[Variable, Value] = {}
        for variable, value in pairs or ():
            self.put(variable, value)

    def put(self, variable: Variable, value: ValueLike) -> None:
        """
        Bind `variable` to `value`, replacing any previous binding.

        Raises:
            UnknownValueError: If `value` is not in the variable's domain.
        """
        self._map[variable] = variable.value(value)

    def remove(self, variable: Variable) -> None:
        del self._map[variable]

    def get(self, variable: Variable) -> Optional[Value]:
        return self._map.get(variable)

    def copy(self) -> "Assignment":
        out = Assignment()
        out._map = dict(self._map)
        return out

    def contains_all(self, other: "Assignment") -> bool:
        """
        Return True if every binding in `other` is also present in self.

        An empty `other` is contained in every assignment.
        """
        for variable, value in other._map.items():
            if self._map.get(variable, _MISSING) != value:
                return False
        return True

    def items(self) -> ItemsView[Variable, Value]:
        return self._map.items()

    def variables(self) -> Tuple[Variable, ...]:
        return tuple(self._map.keys())

    def to_dict(self) -> Dict[str, str]:
        return {var.name: val.label for var, val in self._map.items()}

    def __contains__(self, variable: object) -> bool:
        return variable in self._map

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._map)

    def __len__(self) -> int:
        return len(self._map)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Assignment):
            return NotImplemented
        return self._map == other._map

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{v.name}={val.label}" for v, val in self._map.items()) + "}"

    def __repr__(self) -> str:
        return f"Assignment({self.to_dict()!r})"


class Distribution:
    """
    Mapping from the values of one variable to probabilities.

    Probabilities are stored as given. Rows are not normalized and their sums
    are not checked.
    """

    def __init__(self, variable: Variable) -> None:
        self.variable = variable
        self._probs: Dict[Value, float] = {}

    def put(self, value: ValueLike, probability: float) -> None:
        self._probs[self.variable.value(value)] = float(probability)

    def get(self, value: ValueLike) -> float:
        """
        Return the probability stored for `value`.

        Raises:
            UnknownValueError: If `value` is not in the variable's domain.
            ValueNotSetError: If `value` never received a probability.
        """
        key = self.variable.value(value)
        try:
            return self._probs[key]
        except KeyError:
            raise ValueNotSetError(
                f"No probability set for {self.variable.name}={key.label}"
            ) from None

    def copy(self) -> "Distribution":
        out = Distribution(self.variable)
        out._probs = dict(self._probs)
        return out

    def items(self) -> ItemsView[Value, float]:
        return self._probs.items()

    def is_complete(self) -> bool:
        return all(v in self._probs for v in self.variable.domain)

    def total(self) -> float:
        return float(sum(self._probs.values()))

    def __contains__(self, value: object) -> bool:
        if isinstance(value, str):
            value = Value(value)
        return value in self._probs

    def __len__(self) -> int:
        return len(self._probs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Distribution):
            return NotImplemented
        return self.variable == other.variable and self._probs == other._probs

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        body = ", ".join(f"{v.label}: {p:g}" for v, p in self._probs.items())
        return f"{{{body}}}"

    def __repr__(self) -> str:
        return f"Distribution({self.variable.name!r}, {str(self)})"
