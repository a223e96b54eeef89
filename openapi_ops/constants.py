"""
Name: Constants and settings.
Description: Centralized location for defaults used throughout openapi_ops.
This file contains the document defaults, operation slot layout, reference prefixes and schema derivation settings.
"""


# Document settings
# OpenAPI 3.1 schemas are JSON Schema 2020-12, the dialect pydantic generates
DEFAULT_OPENAPI_VERSION = "3.1.0"

# Operation slots of a path item, in OpenAPI field order
OPERATION_SLOTS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Reference settings
SCHEMA_REF_PREFIX = "#/components/schemas/"
RESPONSE_REF_PREFIX = "#/components/responses/"
SCHEMA_REF_TEMPLATE = SCHEMA_REF_PREFIX + "{model}"

# Schema derivation settings
DEFAULT_SCHEMA_MODE = "serialization"
