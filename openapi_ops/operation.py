"""
Name: Operation manipulation.
Description: Helpers for rewriting an existing OpenAPI document: prefixing paths, applying tags and installing responses on a selection of operations while merging the schema definitions those responses need.
"""

import logging
from typing import Any, Callable, Iterable, Union

from .constants import DEFAULT_SCHEMA_MODE
from .declare import Declare, run_declare
from .models import (
    Document,
    MediaType,
    Operation,
    Reference,
    Response,
    Tag,
    union_tag_names,
    union_tags,
)
from .schema import declare_schema_ref
from .traversal import OperationTraversal, all_operations

logger = logging.getLogger(__name__)

ResponseCombiner = Callable[[Response, Response], Response]


def _trim(segment: str) -> str:
    return segment.strip("/")


def prepend_path(prefix: str, document: Document) -> Document:
    """Prepend a path piece to every path of a document.

    Leading and trailing slashes of both pieces are trimmed, and the result
    always starts with a single slash. Paths that collide after rewriting
    keep only the last path item.

    Args:
        prefix: The path piece to prepend, e.g. ``user/{user_id}``
        document: The document to rewrite

    Returns:
        A new document with rewritten paths
    """
    prefix = _trim(prefix)
    paths = {}
    for path, item in document.paths.items():
        segments = [segment for segment in (prefix, _trim(path)) if segment]
        paths["/" + "/".join(segments)] = item

    logger.debug(f"Prepended '{prefix}' to {len(document.paths)} paths")
    return document.model_copy(update={"paths": paths})


def _as_tag(tag: Union[Tag, str]) -> Tag:
    return tag if isinstance(tag, Tag) else Tag(name=tag)


def apply_tags_for(
    traversal: OperationTraversal, tags: Iterable[Union[Tag, str]], document: Document
) -> Document:
    """Apply tags to the selected operations and register them globally.

    Args:
        traversal: The operations to tag
        tags: Tags (or tag names) to apply
        document: The document to update

    Returns:
        A new document
    """
    tags = [_as_tag(tag) for tag in tags]
    names = [tag.name for tag in tags]

    document = traversal.update(
        document,
        lambda operation: operation.model_copy(
            update={"tags": union_tag_names(operation.tags, names)}
        ),
    )
    return document.model_copy(update={"tags": union_tags(document.tags, tags)})


def apply_tags(tags: Iterable[Union[Tag, str]], document: Document) -> Document:
    """Apply tags to all operations and register them globally."""
    return apply_tags_for(all_operations(), tags, document)


def declare_response(
    media_type: str, type_: Any, mode: str = DEFAULT_SCHEMA_MODE
) -> Declare[Response]:
    """Construct a response for a type while declaring its schema definitions.

    Args:
        media_type: The content type, e.g. ``application/json``
        type_: The type of the response body
        mode: JSON schema mode used to derive the body schema

    Returns:
        A computation producing a response with an empty description
    """
    return declare_schema_ref(type_, mode).map(
        lambda schema: Response(
            description="", content={media_type: MediaType(schema_=schema)}
        )
    )


def set_response_for_with(
    traversal: OperationTraversal,
    combine: ResponseCombiner,
    code: Union[int, str],
    declared: Declare[Response],
    document: Document,
) -> Document:
    """Set or update a response of the selected operations.

    The schema definitions declared while building the response are merged
    into ``components.schemas``. Where an operation already has a response
    at ``code``, the result is ``combine(old, new)``. A referenced response
    that can't be dereferenced is replaced by the new response.

    Args:
        traversal: The operations to update
        combine: Merges an existing response with the new one
        code: HTTP status code (or ``"default"``)
        declared: Computation producing the new response
        document: The document to update

    Returns:
        A new document
    """
    definitions, new = run_declare(declared)
    code = str(code)

    def merged(existing: Union[Reference, Response, None]) -> Response:
        if existing is None:
            return new.model_copy(deep=True)
        if isinstance(existing, Reference):
            old = document.components.resolve_response(existing)
            if old is None:
                return new.model_copy(deep=True)
            existing = old
        return combine(existing.model_copy(deep=True), new.model_copy(deep=True))

    def install(operation: Operation) -> Operation:
        responses = dict(operation.responses)
        responses[code] = merged(responses.get(code))
        return operation.model_copy(update={"responses": responses})

    components = document.components.model_copy(
        update={"schemas": {**document.components.schemas, **definitions}}
    )
    logger.debug(f"Merged {len(definitions)} schema definitions for response {code}")

    document = document.model_copy(update={"components": components})
    return traversal.update(document, install)


def set_response_for(
    traversal: OperationTraversal,
    code: Union[int, str],
    declared: Declare[Response],
    document: Document,
) -> Document:
    """Set a response of the selected operations, overwriting any existing one."""
    return set_response_for_with(
        traversal, lambda old, new: new, code, declared, document
    )


def set_response(
    code: Union[int, str], declared: Declare[Response], document: Document
) -> Document:
    """Set a response of all operations, overwriting any existing one."""
    return set_response_for(all_operations(), code, declared, document)


def set_response_with(
    combine: ResponseCombiner,
    code: Union[int, str],
    declared: Declare[Response],
    document: Document,
) -> Document:
    """Set or update a response of all operations.

    See ``set_response_for_with``.
    """
    return set_response_for_with(all_operations(), combine, code, declared, document)
