"""
Name: Operation traversals.
Description: Provides the OperationTraversal class for selecting operations inside a document, reading them and rewriting them into an updated copy of the document.
"""

import logging
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from .constants import OPERATION_SLOTS
from .models import Document, Operation, PathItem

logger = logging.getLogger(__name__)

# Picks slot positions of a path item, given its path
SlotSelector = Callable[[str, PathItem], Iterable[int]]


class OperationTraversal:
    """A selection of zero or more operations of a document.

    Operations are addressed by path and slot position within the path item.
    They are visited in path insertion order, then slot order.
    """

    def __init__(
        self,
        select: SlotSelector,
        predicate: Optional[Callable[[Operation], bool]] = None,
    ):
        """Initialize the traversal.

        Args:
            select: Function returning the slot positions to visit for a path
            predicate: Optional filter applied to the operations in those slots
        """
        self.select = select
        self.predicate = predicate

    def _positions(self, path: str, item: PathItem) -> List[int]:
        slots = item.slots()
        return [
            position
            for position in self.select(path, item)
            if slots[position] is not None
            and (self.predicate is None or self.predicate(slots[position]))
        ]

    def items(self, document: Document) -> Iterator[Tuple[str, str, Operation]]:
        """Iterate over the selected operations.

        Args:
            document: The document to read

        Yields:
            Tuples of (path, method, operation)
        """
        for path, item in document.paths.items():
            slots = item.slots()
            for position in self._positions(path, item):
                yield path, OPERATION_SLOTS[position], slots[position]

    def collect(self, document: Document) -> List[Operation]:
        """Get the selected operations in traversal order."""
        return [operation for _, _, operation in self.items(document)]

    def update(
        self, document: Document, fn: Callable[[Operation], Operation]
    ) -> Document:
        """Rewrite every selected operation.

        Args:
            document: The document to update
            fn: Function receiving a copy of an operation and returning its
                replacement

        Returns:
            A new document; the input document is left unchanged
        """
        paths = {}
        updated = 0
        for path, item in document.paths.items():
            positions = self._positions(path, item)
            if positions:
                slots = item.slots()
                for position in positions:
                    slots[position] = fn(slots[position].model_copy(deep=True))
                item = item.with_slots(slots)
                updated += len(positions)
            paths[path] = item

        logger.debug(f"Updated {updated} operations across {len(paths)} paths")
        return document.model_copy(update={"paths": paths})

    def filter(self, predicate: Callable[[Operation], bool]) -> "OperationTraversal":
        """Narrow this traversal to the operations satisfying ``predicate``."""
        if self.predicate is None:
            combined = predicate
        else:
            current = self.predicate
            combined = lambda operation: current(operation) and predicate(operation)
        return OperationTraversal(self.select, combined)


def all_operations() -> OperationTraversal:
    """Select every operation of a document."""
    return OperationTraversal(lambda path, item: range(len(OPERATION_SLOTS)))


def operations_of(sub: Document) -> OperationTraversal:
    """Select only the operations that are also present in ``sub``.

    An operation is identified by its path and its slot position in the path
    item. Paths missing from ``sub`` are not visited.

    Args:
        sub: Document whose operations define the selection

    Returns:
        The traversal
    """

    def select(path: str, item: PathItem) -> List[int]:
        sub_item = sub.paths.get(path)
        if sub_item is None:
            return []
        return [
            position
            for position, operation in enumerate(sub_item.slots())
            if operation is not None
        ]

    return OperationTraversal(select)
