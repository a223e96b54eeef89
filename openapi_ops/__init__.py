"""
Name: openapi_ops package.
Description: Traversal, mutation and schema-declaration utilities for OpenAPI documents that are already loaded in memory.
"""

__version__ = "0.1.0"

from .declare import (
    Declare,
    declare,
    eval_declare,
    exec_declare,
    look,
    run_declare,
    sequence_declare,
)
from .models import (
    Components,
    Document,
    Info,
    MediaType,
    Operation,
    PathItem,
    Reference,
    Response,
    Tag,
)
from .operation import (
    apply_tags,
    apply_tags_for,
    declare_response,
    prepend_path,
    set_response,
    set_response_for,
    set_response_for_with,
    set_response_with,
)
from .schema import (
    declare_named_schema,
    declare_schema,
    declare_schema_ref,
    inline_all_schemas,
    inline_non_recursive_schemas,
    inline_schemas,
    inline_schemas_when,
    schema_name,
    sketch_schema,
    sketch_strict_schema,
    to_inlined_schema,
    to_schema,
    to_schema_ref,
)
from .traversal import OperationTraversal, all_operations, operations_of

__all__ = [
    "Declare",
    "declare",
    "eval_declare",
    "exec_declare",
    "look",
    "run_declare",
    "sequence_declare",
    "Components",
    "Document",
    "Info",
    "MediaType",
    "Operation",
    "PathItem",
    "Reference",
    "Response",
    "Tag",
    "apply_tags",
    "apply_tags_for",
    "declare_response",
    "prepend_path",
    "set_response",
    "set_response_for",
    "set_response_for_with",
    "set_response_with",
    "declare_named_schema",
    "declare_schema",
    "declare_schema_ref",
    "inline_all_schemas",
    "inline_non_recursive_schemas",
    "inline_schemas",
    "inline_schemas_when",
    "schema_name",
    "sketch_schema",
    "sketch_strict_schema",
    "to_inlined_schema",
    "to_schema",
    "to_schema_ref",
    "OperationTraversal",
    "all_operations",
    "operations_of",
]
