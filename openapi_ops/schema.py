"""
Name: Schema derivation.
Description: Derives OpenAPI schemas from Python types using pydantic's JSON schema generation, declaring named definitions through Declare. Also includes utilities for inlining referenced definitions and sketching schemas from sample values.
"""

import copy
import logging
import re
from enum import Enum
from typing import (
    Any,
    Callable,
    Iterable,
    Iterator,
    List,
    Optional,
    Set,
    Tuple,
    Union,
    get_origin,
)

from pydantic import BaseModel, TypeAdapter

from .constants import DEFAULT_SCHEMA_MODE, SCHEMA_REF_PREFIX, SCHEMA_REF_TEMPLATE
from .declare import Declare, declare, eval_declare, look, run_declare
from .models import Definitions, Reference, Schema

logger = logging.getLogger(__name__)


def schema_name(type_: Any) -> Optional[str]:
    """Get the definition name of a type.

    Pydantic models and enums are named; every other type is described
    inline.

    Args:
        type_: The type to name

    Returns:
        The definition name, or None for types without one
    """
    if (
        isinstance(type_, type)
        and get_origin(type_) is None
        and issubclass(type_, (BaseModel, Enum))
    ):
        # Same normalization pydantic applies to its $defs keys
        return re.sub(r"[^a-zA-Z0-9.\-_]", "_", type_.__name__)
    return None


def _generate(type_: Any, mode: str) -> Tuple[Optional[str], Schema, Definitions]:
    """Generate the JSON schema of a type and split off its definitions."""
    schema = TypeAdapter(type_).json_schema(ref_template=SCHEMA_REF_TEMPLATE, mode=mode)
    definitions = schema.pop("$defs", {})

    # Recursive types and enums come back as a bare reference into $defs
    ref = schema.get("$ref")
    if len(schema) == 1 and isinstance(ref, str) and ref.startswith(SCHEMA_REF_PREFIX):
        name = Reference(ref=ref).name
        if name in definitions:
            return name, definitions.pop(name), definitions

    return schema_name(type_), schema, definitions


def declare_named_schema(
    type_: Any, mode: str = DEFAULT_SCHEMA_MODE
) -> Declare[Tuple[Optional[str], Schema]]:
    """Derive the schema of a type, declaring the definitions it refers to.

    The type's own definition is not declared, only those it depends on.

    Args:
        type_: Any type pydantic can describe
        mode: JSON schema mode, ``"serialization"`` or ``"validation"``

    Returns:
        A computation producing the type's name (None if unnamed) and schema
    """

    def run(definitions: Definitions) -> Tuple[Definitions, Tuple[Optional[str], Schema]]:
        name, schema, nested = _generate(type_, mode)
        return declare(nested)(definitions)[0], (name, schema)

    return Declare(run)


def declare_schema(type_: Any, mode: str = DEFAULT_SCHEMA_MODE) -> Declare[Schema]:
    """Derive the schema body of a type, declaring the definitions it refers to."""
    return declare_named_schema(type_, mode).map(lambda named: named[1])


def declare_schema_ref(
    type_: Any, mode: str = DEFAULT_SCHEMA_MODE
) -> Declare[Union[Reference, Schema]]:
    """Derive a schema or a reference to a declared schema for a type.

    Named types are declared in the definitions table and a reference to
    them is returned. A name that is already declared is not derived again.
    Unnamed types are returned inline.

    Args:
        type_: Any type pydantic can describe
        mode: JSON schema mode, ``"serialization"`` or ``"validation"``

    Returns:
        A computation producing a Reference or an inline schema
    """
    known_name = schema_name(type_)

    def derive(known: Definitions) -> Declare[Union[Reference, Schema]]:
        if known_name is not None and known_name in known:
            return Declare.pure(Reference.to_schema(known_name))

        def finish(named: Tuple[Optional[str], Schema]) -> Declare[Union[Reference, Schema]]:
            name, schema = named
            if name is None:
                return Declare.pure(schema)
            logger.debug(f"Declaring schema definition '{name}'")
            return declare({name: schema}).then(Declare.pure(Reference.to_schema(name)))

        return declare_named_schema(type_, mode).bind(finish)

    return look().bind(derive)


def to_schema(type_: Any, mode: str = DEFAULT_SCHEMA_MODE) -> Schema:
    """Derive the schema body of a type, discarding declarations."""
    return eval_declare(declare_schema(type_, mode))


def to_schema_ref(type_: Any, mode: str = DEFAULT_SCHEMA_MODE) -> Union[Reference, Schema]:
    """Derive a schema or reference for a type, discarding declarations."""
    return eval_declare(declare_schema_ref(type_, mode))


def to_inlined_schema(type_: Any, mode: str = DEFAULT_SCHEMA_MODE) -> Schema:
    """Derive the schema of a type with every non-recursive reference inlined."""
    definitions, schema = run_declare(declare_schema(type_, mode))
    return inline_all_schemas(definitions, schema)


def _schema_ref_name(obj: Any) -> Optional[str]:
    if isinstance(obj, dict):
        ref = obj.get("$ref")
        if isinstance(ref, str) and ref.startswith(SCHEMA_REF_PREFIX):
            return Reference(ref=ref).name
    return None


def _referenced_names(obj: Any) -> Iterator[str]:
    if isinstance(obj, dict):
        name = _schema_ref_name(obj)
        if name is not None:
            yield name
        for value in obj.values():
            yield from _referenced_names(value)
    elif isinstance(obj, list):
        for item in obj:
            yield from _referenced_names(item)


def inline_schemas_when(
    predicate: Callable[[str], bool], definitions: Definitions, schema: Schema
) -> Schema:
    """Replace references to definitions by the definitions themselves.

    Only names accepted by ``predicate`` and present in ``definitions`` are
    inlined. A reference met again while its own definition is being inlined
    is left in place, so recursive schemas stay finite.

    Args:
        predicate: Selects the definition names to inline
        definitions: Definitions table to inline from
        schema: The schema to rewrite

    Returns:
        A new schema with the selected references inlined
    """

    def resolve(obj: Any, expanding: Tuple[str, ...]) -> Any:
        if isinstance(obj, dict):
            name = _schema_ref_name(obj)
            if (
                name is not None
                and name in definitions
                and name not in expanding
                and predicate(name)
            ):
                target = resolve(copy.deepcopy(definitions[name]), expanding + (name,))
                siblings = {k: resolve(v, expanding) for k, v in obj.items() if k != "$ref"}
                return {**target, **siblings}
            return {key: resolve(value, expanding) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [resolve(item, expanding) for item in obj]
        else:
            return obj

    return resolve(schema, ())


def inline_schemas(names: Iterable[str], definitions: Definitions, schema: Schema) -> Schema:
    """Inline the given definition names into a schema."""
    selected = set(names)
    return inline_schemas_when(lambda name: name in selected, definitions, schema)


def inline_all_schemas(definitions: Definitions, schema: Schema) -> Schema:
    """Inline every known definition into a schema."""
    return inline_schemas_when(lambda name: True, definitions, schema)


def _recursive_names(definitions: Definitions) -> Set[str]:
    """Names of the definitions that refer back to themselves."""
    recursive = set()
    for start in definitions:
        seen = set()
        pending = list(_referenced_names(definitions[start]))
        while pending:
            name = pending.pop()
            if name == start:
                recursive.add(start)
                break
            if name in seen or name not in definitions:
                continue
            seen.add(name)
            pending.extend(_referenced_names(definitions[name]))
    return recursive


def inline_non_recursive_schemas(definitions: Definitions, schema: Schema) -> Schema:
    """Inline every definition that does not refer back to itself."""
    recursive = _recursive_names(definitions)
    return inline_schemas_when(lambda name: name not in recursive, definitions, schema)


def sketch_schema(value: Any) -> Schema:
    """Sketch a schema from a sample JSON value.

    Args:
        value: A decoded JSON value

    Returns:
        A schema describing the value, with the value itself as example
    """
    schema = _sketch(value)
    schema["example"] = value
    return schema


def _sketch(value: Any) -> Schema:
    if value is None:
        return {"type": "null"}
    elif isinstance(value, bool):
        return {"type": "boolean"}
    elif isinstance(value, int):
        return {"type": "integer"}
    elif isinstance(value, float):
        return {"type": "number"}
    elif isinstance(value, str):
        return {"type": "string"}
    elif isinstance(value, list):
        schema = {"type": "array"}
        items = [_sketch(item) for item in value]
        # Only describe items when every element has the same shape
        if items and all(item == items[0] for item in items):
            schema["items"] = items[0]
        return schema
    elif isinstance(value, dict):
        schema = {"type": "object"}
        if value:
            schema["required"] = list(value)
            schema["properties"] = {key: _sketch(item) for key, item in value.items()}
        return schema
    raise ValueError(f"Unsupported JSON value: {value!r}")


def sketch_strict_schema(value: Any) -> Schema:
    """Sketch a schema that accepts exactly the given sample JSON value.

    Every scalar is pinned with ``enum``. Strings, arrays and objects also
    get length, size and property bounds, and objects allow no properties
    beyond the sampled ones.

    Args:
        value: A decoded JSON value

    Returns:
        A schema whose only instance is ``value``
    """
    if value is None:
        return {"type": "null"}
    elif isinstance(value, bool):
        return {"type": "boolean", "enum": [value]}
    elif isinstance(value, int):
        return {"type": "integer", "enum": [value]}
    elif isinstance(value, float):
        return {"type": "number", "enum": [value]}
    elif isinstance(value, str):
        return {
            "type": "string",
            "minLength": len(value),
            "maxLength": len(value),
            "enum": [value],
        }
    elif isinstance(value, list):
        items = [sketch_strict_schema(item) for item in value]
        schema = {
            "type": "array",
            "minItems": len(value),
            "maxItems": len(value),
            "uniqueItems": _all_distinct(items),
        }
        if items and all(item == items[0] for item in items):
            schema["items"] = items[0]
        elif items:
            schema["prefixItems"] = items
            schema["items"] = False
        return schema
    elif isinstance(value, dict):
        return {
            "type": "object",
            "required": list(value),
            "properties": {key: sketch_strict_schema(item) for key, item in value.items()},
            "minProperties": len(value),
            "maxProperties": len(value),
            "additionalProperties": False,
        }
    raise ValueError(f"Unsupported JSON value: {value!r}")


def _all_distinct(schemas: List[Schema]) -> bool:
    # Strict sketches pin their value, so equal sketches mean equal values
    return all(
        schemas[i] != schemas[j]
        for i in range(len(schemas))
        for j in range(i + 1, len(schemas))
    )
