"""Configuration file for pytest."""

import sys
import pytest
from pathlib import Path

# Add the project root to the path so tests can import the package
sys.path.insert(0, str(Path(__file__).parent.parent))

# Fixtures for test data


@pytest.fixture
def sample_openapi_spec():
    """Return a sample OpenAPI document as a decoded dictionary."""
    return {
        "openapi": "3.0.0",
        "info": {
            "title": "Test API",
            "description": "API for testing",
            "version": "1.0.0",
        },
        "servers": [{"url": "https://api.example.com/v1"}],
        "paths": {
            "/users": {
                "get": {
                    "operationId": "listUsers",
                    "summary": "List users",
                    "tags": ["users"],
                    "parameters": [
                        {
                            "name": "limit",
                            "in": "query",
                            "schema": {"type": "integer"},
                        }
                    ],
                    "responses": {
                        "200": {
                            "description": "A list of users",
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "array",
                                        "items": {"$ref": "#/components/schemas/User"},
                                    }
                                }
                            },
                        },
                        "404": {"$ref": "#/components/responses/NotFound"},
                    },
                },
                "post": {
                    "operationId": "createUser",
                    "requestBody": {
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/User"}
                            }
                        }
                    },
                    "responses": {"201": {"description": "Created"}},
                },
            },
            "/users/{userId}": {
                "parameters": [
                    {"name": "userId", "in": "path", "required": True}
                ],
                "get": {
                    "operationId": "getUser",
                    "responses": {
                        "200": {
                            "description": "A user",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/User"}
                                }
                            },
                        }
                    },
                },
            },
        },
        "components": {
            "schemas": {
                "User": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "string"},
                        "name": {"type": "string"},
                    },
                }
            },
            "responses": {"NotFound": {"description": "Not found"}},
            "securitySchemes": {
                "bearerAuth": {"type": "http", "scheme": "bearer"},
            },
        },
        "tags": [{"name": "users", "description": "User management"}],
    }
