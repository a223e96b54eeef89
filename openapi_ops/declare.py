"""
Name: Schema declarations.
Description: Provides the Declare computation type, which produces a value while collecting named schema definitions, and the helpers to build, sequence and run such computations.
"""

from typing import Any, Callable, Generic, Iterable, List, Optional, Tuple, TypeVar

from .models import Definitions

T = TypeVar("T")
U = TypeVar("U")


class Declare(Generic[T]):
    """A computation producing a value and a table of schema definitions.

    A computation is a function from the definitions declared so far to the
    updated definitions and a result. Sequencing two computations threads the
    table from the first into the second; a definition declared later
    replaces an earlier one with the same name.
    """

    def __init__(self, run: Callable[[Definitions], Tuple[Definitions, T]]):
        """Initialize the computation.

        Args:
            run: Function taking the current definitions and returning the
                updated definitions together with the result
        """
        self._run = run

    def __call__(self, definitions: Definitions) -> Tuple[Definitions, T]:
        return self._run(definitions)

    @classmethod
    def pure(cls, value: T) -> "Declare[T]":
        """A computation that declares nothing and returns ``value``."""
        return cls(lambda definitions: (definitions, value))

    def bind(self, fn: Callable[[T], "Declare[U]"]) -> "Declare[U]":
        """Run this computation, then the one ``fn`` builds from its result."""

        def run(definitions: Definitions) -> Tuple[Definitions, U]:
            definitions, value = self(definitions)
            return fn(value)(definitions)

        return Declare(run)

    def map(self, fn: Callable[[T], U]) -> "Declare[U]":
        """Transform the result, keeping the declarations."""

        def run(definitions: Definitions) -> Tuple[Definitions, U]:
            definitions, value = self(definitions)
            return definitions, fn(value)

        return Declare(run)

    def then(self, other: "Declare[U]") -> "Declare[U]":
        """Run this computation for its declarations only, then ``other``."""
        return self.bind(lambda _: other)


def declare(definitions: Definitions) -> Declare[None]:
    """Register a batch of named schema definitions.

    Args:
        definitions: Definitions to add; they replace existing entries of the
            same name

    Returns:
        A computation with no result
    """
    batch = dict(definitions)
    return Declare(lambda current: ({**current, **batch}, None))


def look() -> Declare[Definitions]:
    """A computation returning the definitions declared so far."""
    return Declare(lambda current: (current, dict(current)))


def sequence_declare(computations: Iterable[Declare[Any]]) -> Declare[List[Any]]:
    """Run computations in order and collect their results."""
    computations = list(computations)

    def run(definitions: Definitions) -> Tuple[Definitions, List[Any]]:
        results = []
        for computation in computations:
            definitions, value = computation(definitions)
            results.append(value)
        return definitions, results

    return Declare(run)


def run_declare(
    computation: Declare[T], definitions: Optional[Definitions] = None
) -> Tuple[Definitions, T]:
    """Run a computation.

    Args:
        computation: The computation to run
        definitions: Initial definitions table, empty by default

    Returns:
        The final definitions table and the result
    """
    return computation(dict(definitions or {}))


def eval_declare(computation: Declare[T], definitions: Optional[Definitions] = None) -> T:
    """Run a computation and keep only its result."""
    return run_declare(computation, definitions)[1]


def exec_declare(
    computation: Declare[Any], definitions: Optional[Definitions] = None
) -> Definitions:
    """Run a computation and keep only its definitions."""
    return run_declare(computation, definitions)[0]
