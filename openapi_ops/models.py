"""
Name: OpenAPI document models.
Description: Pydantic models for the parts of an OpenAPI document that openapi_ops traverses and rewrites: paths, operations, responses, components and tags.
"""

from typing import Annotated, Any, Dict, Iterable, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
)

from .constants import (
    DEFAULT_OPENAPI_VERSION,
    OPERATION_SLOTS,
    RESPONSE_REF_PREFIX,
    SCHEMA_REF_PREFIX,
)

# A JSON schema object, kept as a plain dictionary
Schema = Dict[str, Any]

# Named schema definitions, in declaration order
Definitions = Dict[str, Schema]


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, (list, dict)) and not value)


class OpenApiModel(BaseModel):
    """Base of the document models.

    Unknown fields are kept and exported as they were read. Declared fields
    that are ``None`` or empty containers are left out of exported
    dictionaries, the way OpenAPI documents omit absent fields.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @model_serializer(mode="wrap")
    def _omit_absent_fields(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> Dict[str, Any]:
        data = handler(self)
        for name, field in type(self).model_fields.items():
            key = field.alias if info.by_alias and field.alias else name
            if key in data and _is_absent(data[key]):
                del data[key]
        return data


class Reference(OpenApiModel):
    """A local ``$ref`` pointer into one of the document's component tables.

    Any object with a ``$ref`` key is a reference. Sibling fields such as
    ``summary`` and ``description`` are kept but never resolved.
    """

    ref: str = Field(alias="$ref")
    summary: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def parse(cls, ref: str) -> "Reference":
        """Build a reference from a ``$ref`` string.

        Args:
            ref: The reference string, e.g. ``#/components/schemas/User``

        Returns:
            The reference

        Raises:
            ValueError: If the reference does not point into this document
        """
        if not ref.startswith("#/"):
            raise ValueError(f"External references not supported: {ref}")
        return cls(ref=ref)

    @classmethod
    def to_schema(cls, name: str) -> "Reference":
        """Reference a named schema in ``components.schemas``."""
        return cls(ref=SCHEMA_REF_PREFIX + _escape(name))

    @classmethod
    def to_response(cls, name: str) -> "Reference":
        """Reference a named response in ``components.responses``."""
        return cls(ref=RESPONSE_REF_PREFIX + _escape(name))

    @property
    def name(self) -> str:
        """Name of the referenced component (last pointer segment)."""
        return _unescape(self.ref.rsplit("/", 1)[-1])

    def points_into(self, prefix: str) -> bool:
        """Check whether the reference targets the component table at ``prefix``."""
        return self.ref.startswith(prefix) and "/" not in self.ref[len(prefix):]


def _escape(name: str) -> str:
    return name.replace("~", "~0").replace("/", "~1")


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


SchemaOrRef = Annotated[Union[Reference, Schema], Field(union_mode="left_to_right")]


class MediaType(OpenApiModel):
    """Media type object of a response's ``content`` map."""

    schema_: Optional[SchemaOrRef] = Field(default=None, alias="schema")


class Response(OpenApiModel):
    """An inline response object."""

    description: str = ""
    content: Dict[str, MediaType] = Field(default_factory=dict)
    headers: Optional[Dict[str, Any]] = None


ResponseOrRef = Annotated[Union[Reference, Response], Field(union_mode="left_to_right")]


def _status_keys(value: Any) -> Any:
    # Status codes are accepted as ints but stored as strings, like the JSON keys
    if isinstance(value, dict):
        return {str(code): response for code, response in value.items()}
    return value


class Operation(OpenApiModel):
    """A single HTTP method's behaviour at one path."""

    tags: List[str] = Field(default_factory=list)
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    parameters: Optional[List[Dict[str, Any]]] = None
    request_body: Optional[Dict[str, Any]] = Field(default=None, alias="requestBody")
    responses: Dict[str, ResponseOrRef] = Field(default_factory=dict)
    deprecated: Optional[bool] = None

    @field_validator("responses", mode="before")
    @classmethod
    def _normalize_status_codes(cls, value: Any) -> Any:
        return _status_keys(value)


class PathItem(OpenApiModel):
    """The operations available at one path.

    Besides its descriptive fields, a path item is a fixed, ordered row of
    operation slots (see ``OPERATION_SLOTS``). Traversals address operations
    by their position in that row, so they never depend on method names.
    """

    summary: Optional[str] = None
    description: Optional[str] = None
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None
    parameters: Optional[List[Dict[str, Any]]] = None

    def slots(self) -> List[Optional[Operation]]:
        """Get the operation slots in their fixed order.

        Returns:
            One entry per slot, ``None`` where no operation is defined
        """
        return [getattr(self, method) for method in OPERATION_SLOTS]

    def with_slots(self, slots: List[Optional[Operation]]) -> "PathItem":
        """Copy this path item with all operation slots replaced.

        Args:
            slots: New slot values, in the order returned by ``slots()``

        Returns:
            The updated path item
        """
        if len(slots) != len(OPERATION_SLOTS):
            raise ValueError(
                f"Expected {len(OPERATION_SLOTS)} operation slots, got {len(slots)}"
            )
        return self.model_copy(update=dict(zip(OPERATION_SLOTS, slots)))

    def merge(self, other: "PathItem") -> "PathItem":
        """Fill this path item's empty slots with the operations of ``other``."""
        slots = [
            mine if mine is not None else theirs
            for mine, theirs in zip(self.slots(), other.slots())
        ]
        return self.with_slots(slots)


class Tag(OpenApiModel):
    """Tag metadata. Tags are identified by name."""

    name: str
    description: Optional[str] = None
    external_docs: Optional[Dict[str, Any]] = Field(default=None, alias="externalDocs")


class Info(OpenApiModel):
    """Document metadata."""

    title: str = ""
    version: str = ""
    description: Optional[str] = None


class Components(OpenApiModel):
    """Reusable component tables of a document."""

    schemas: Definitions = Field(default_factory=dict)
    responses: Dict[str, Response] = Field(default_factory=dict)

    def resolve_response(self, reference: Reference) -> Optional[Response]:
        """Look up a referenced response by name.

        Args:
            reference: A reference into ``components.responses``

        Returns:
            The response, or None if the reference can't be resolved
        """
        if not reference.points_into(RESPONSE_REF_PREFIX):
            return None
        return self.responses.get(reference.name)


class Document(OpenApiModel):
    """An OpenAPI document."""

    openapi: str = DEFAULT_OPENAPI_VERSION
    info: Info = Field(default_factory=Info)
    paths: Dict[str, PathItem] = Field(default_factory=dict)
    components: Components = Field(default_factory=Components)
    tags: List[Tag] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        """Build a document from an already decoded OpenAPI dictionary."""
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Export the document as a JSON-compatible dictionary.

        Absent fields are omitted, so a decoded document exports back to the
        dictionary it was read from.
        """
        return self.model_dump(by_alias=True)

    def merge(self, other: "Document") -> "Document":
        """Combine two documents.

        Paths present in both documents are merged slot by slot. Component
        tables and tags are unioned. On any collision this document wins.

        Args:
            other: The document to merge in

        Returns:
            The combined document
        """
        paths = dict(self.paths)
        for path, item in other.paths.items():
            paths[path] = paths[path].merge(item) if path in paths else item

        components = self.components.model_copy(
            update={
                "schemas": _union_left(
                    self.components.schemas, other.components.schemas
                ),
                "responses": _union_left(
                    self.components.responses, other.components.responses
                ),
            }
        )
        return self.model_copy(
            update={
                "paths": paths,
                "components": components,
                "tags": union_tags(self.tags, other.tags),
            }
        )


def _union_left(left: Dict[str, Any], right: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(left)
    for key, value in right.items():
        merged.setdefault(key, value)
    return merged


def union_tag_names(existing: Iterable[str], new: Iterable[str]) -> List[str]:
    """Ordered union of tag names; existing names keep their position."""
    names = list(existing)
    for name in new:
        if name not in names:
            names.append(name)
    return names


def union_tags(existing: Iterable[Tag], new: Iterable[Tag]) -> List[Tag]:
    """Ordered union of tags, keyed by name. An existing tag keeps its entry."""
    tags = list(existing)
    seen = {tag.name for tag in tags}
    for tag in new:
        if tag.name not in seen:
            seen.add(tag.name)
            tags.append(tag)
    return tags
