"""
Exception hierarchy for network construction and table lookup.

Every error raised by the package derives from `BayesNetError`, which is a
`ValueError` so that callers treating bad model input as a value error keep
working unchanged.
"""

from __future__ import annotations


class BayesNetError(ValueError):
    """Base class for all network construction and lookup errors."""


class DuplicateVariableNameError(BayesNetError):
    """A variable with the same name is already registered in the network."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Variable {name!r} is already declared")
        self.name = name


class UndeclaredVariableError(BayesNetError):
    """A declaration references a variable that has not been registered yet."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Variable {name!r} has not been declared")
        self.name = name


class CyclicDependencyError(BayesNetError):
    """Connecting a variable to its parents would introduce a directed cycle."""


class NoMatchingRowError(BayesNetError):
    """No stored CPT row is consistent with the queried assignment."""


class ValueNotSetError(BayesNetError):
    """A value was never given a probability in an otherwise matching row."""


class UnknownValueError(BayesNetError):
    """A label is not part of a variable's domain."""


class MalformedTableLengthError(BayesNetError):
    """A number sequence does not match the size implied by its dimensions."""

    def __init__(self, message: str, *, expected: int, actual: int) -> None:
        super().__init__(message)
        self.expected = int(expected)
        self.actual = int(actual)


class UnsupportedFeatureError(BayesNetError):
    """A recognised declaration form that this package refuses to interpret."""


class InvalidDeclarationError(BayesNetError):
    """A probability declaration is structurally inconsistent."""


class InvalidNumberError(BayesNetError):
    """A token cannot be read as a probability."""


class XMLBIFFormatError(BayesNetError):
    """An XMLBIF document is missing required elements."""
