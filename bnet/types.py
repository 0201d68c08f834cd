from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Sequence, Tuple, Union

from bnet.errors import InvalidDeclarationError, UnknownValueError


@dataclass(frozen=True)
class Value:
    """
    One domain label.

    Values are compared and hashed by label, so two separately created
    `Value("true")` objects are interchangeable.
    """

    label: str

    def __init__(self, label: str) -> None:
        object.__setattr__(self, "label", str(label))

    def __str__(self) -> str:
        return self.label


ValueLike = Union[Value, str]


class Domain:
    """
    Ordered, finite, non-empty set of values a variable may take.

    The order is significant: it fixes each value's position in the counting
    order used when tables are flattened.
    """

    def __init__(self, labels: Sequence[ValueLike]) -> None:
        values = tuple(v if isinstance(v, Value) else Value(v) for v in labels)
        if not values:
            raise InvalidDeclarationError("Domain must have at least one value")
        positions: Dict[str, int] = {}
        for pos, v in enumerate(values):
            if v.label in positions:
                raise InvalidDeclarationError(f"Domain has duplicate value {v.label!r}")
            positions[v.label] = pos
        self._values: Tuple[Value, ...] = values
        self._positions = positions

    @property
    def values(self) -> Tuple[Value, ...]:
        return self._values

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(v.label for v in self._values)

    def value(self, label: ValueLike) -> Value:
        """
        Return the domain's Value for `label`.

        Raises:
            UnknownValueError: If the label is not part of this domain.
        """
        key = label.label if isinstance(label, Value) else str(label)
        pos = self._positions.get(key)
        if pos is None:
            raise UnknownValueError(f"Unknown value {key!r}; expected one of {list(self.labels)}")
        return self._values[pos]

    def index(self, value: ValueLike) -> int:
        return self._positions[self.value(value).label]

    def __contains__(self, value: object) -> bool:
        if isinstance(value, Value):
            return value.label in self._positions
        if isinstance(value, str):
            return value in self._positions
        return False

    def __iter__(self) -> Iterator[Value]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Domain):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        return f"Domain({list(self.labels)!r})"


class Variable:
    """
    A named discrete random variable.

    Identity is by name: two Variable objects with the same name compare equal
    and hash alike, whatever their domains.
    """

    def __init__(self, name: str, domain: Union[Domain, Sequence[ValueLike]]) -> None:
        name = str(name).strip()
        if not name:
            raise InvalidDeclarationError("Variable name cannot be empty")
        self._name = name
        self._domain = domain if isinstance(domain, Domain) else Domain(domain)

    @property
    def name(self) -> str:
        return self._name

    @property
    def domain(self) -> Domain:
        return self._domain

    def value(self, label: ValueLike) -> Value:
        return self._domain.value(label)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Variable):
            return NotImplemented
        return self._name == other._name

    def __hash__(self) -> int:
        return hash(("Variable", self._name))

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Variable({self._name!r}, {list(self._domain.labels)!r})"
