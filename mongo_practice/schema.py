# schema.py - $jsonSchema validators applied by create_collections
from typing import Any, Dict

import jsonschema
from jsonschema import FormatChecker

EMAIL_PATTERN = r"^\S+@\S+\.\S+$"

users_schema = {
    "bsonType": "object",
    "required": ["name", "email", "password"],
    "properties": {
        "name": {"bsonType": "string", "minLength": 2},
        "email": {"bsonType": "string", "pattern": EMAIL_PATTERN},
        "password": {"bsonType": "string", "minLength": 6},
        "age": {"bsonType": ["int", "null"], "minimum": 18, "maximum": 120},
        "status": {"enum": ["active", "inactive", "banned"]},
        "profile": {
            "bsonType": "object",
            "properties": {
                "bio": {"bsonType": ["string", "null"]},
                "avatar": {"bsonType": ["string", "null"]},
                "social": {
                    "bsonType": "object",
                    "properties": {
                        "twitter": {"bsonType": ["string", "null"]},
                        "linkedin": {"bsonType": ["string", "null"]},
                    },
                },
            },
        },
        "hobbies": {"bsonType": "array", "items": {"bsonType": "string"}},
        "credits": {"bsonType": ["int", "long", "double"]},
        "createdAt": {"bsonType": "date"},
        "updatedAt": {"bsonType": "date"},
    },
}

products_schema = {
    "bsonType": "object",
    "required": ["name", "category", "price"],
    "properties": {
        "name": {"bsonType": "string", "minLength": 1},
        "slug": {"bsonType": "string"},
        "category": {"enum": ["electronics", "clothing", "books", "furniture"]},
        "price": {"bsonType": ["int", "long", "double"], "minimum": 0},
        "stock": {"bsonType": ["int", "long"], "minimum": 0},
        "images": {"bsonType": "array", "items": {"bsonType": "string"}},
        "reviews": {
            "bsonType": "array",
            "items": {
                "bsonType": "object",
                "properties": {
                    "user": {"bsonType": ["objectId", "null"]},
                    "rating": {"bsonType": "int", "minimum": 1, "maximum": 5},
                    "comment": {"bsonType": ["string", "null"]},
                    "createdAt": {"bsonType": "date"},
                },
            },
        },
        "avgRating": {"bsonType": ["int", "long", "double"]},
        "createdAt": {"bsonType": "date"},
        "updatedAt": {"bsonType": "date"},
    },
}

orders_schema = {
    "bsonType": "object",
    "required": ["orderNumber", "user", "total"],
    "properties": {
        "orderNumber": {"bsonType": "string"},
        "user": {"bsonType": "objectId"},
        "items": {
            "bsonType": "array",
            "items": {
                "bsonType": "object",
                "properties": {
                    "product": {"bsonType": "objectId"},
                    "quantity": {"bsonType": "int", "minimum": 1},
                    "price": {"bsonType": ["int", "long", "double"]},
                },
            },
        },
        "total": {"bsonType": ["int", "long", "double"]},
        "status": {"enum": ["pending", "processing", "shipped", "delivered", "cancelled"]},
        "shippingAddress": {
            "bsonType": "object",
            "properties": {
                "street": {"bsonType": ["string", "null"]},
                "city": {"bsonType": ["string", "null"]},
                "zipCode": {"bsonType": ["string", "null"]},
                "country": {"bsonType": ["string", "null"]},
            },
        },
        "createdAt": {"bsonType": "date"},
        "updatedAt": {"bsonType": "date"},
    },
}

sessions_schema = {
    "bsonType": "object",
    "required": ["sessionId", "createdAt"],
    "properties": {
        "sessionId": {"bsonType": "string"},
        "userId": {"bsonType": "string"},
        "createdAt": {"bsonType": "date"},
    },
}

VALIDATORS = {
    "users": users_schema,
    "products": products_schema,
    "orders": orders_schema,
    "sessions": sessions_schema,
}


class DocumentValidationError(ValueError):
    """Raised when a document fails its collection's validator client-side."""

    def __init__(self, collection: str, message: str):
        self.collection = collection
        self.message = message
        super().__init__(f"{collection}: {message}")


# bsonType -> JSON Schema type. date and objectId have no JSON equivalent and
# are checked by the server only.
_BSON_TYPE_MAP = {
    "string": "string",
    "int": "integer",
    "long": "integer",
    "double": "number",
    "decimal": "number",
    "number": "number",
    "bool": "boolean",
    "object": "object",
    "array": "array",
    "null": "null",
}

_PASSTHROUGH_KEYWORDS = ("enum", "minimum", "maximum", "pattern", "minLength", "maxLength")

_JSON_SCHEMA_CACHE: Dict[str, dict] = {}


def bson_to_jsonschema(bson_schema: dict) -> dict:
    json_schema: Dict[str, Any] = {}

    bsonType = bson_schema.get("bsonType")
    if bsonType is not None:
        types = bsonType if isinstance(bsonType, list) else [bsonType]
        if all(t in _BSON_TYPE_MAP for t in types):
            json_types = []
            for t in types:
                mapped = _BSON_TYPE_MAP[t]
                if mapped not in json_types:
                    json_types.append(mapped)
            json_schema["type"] = json_types[0] if len(json_types) == 1 else json_types

    for keyword in _PASSTHROUGH_KEYWORDS:
        if keyword in bson_schema:
            json_schema[keyword] = bson_schema[keyword]

    if "properties" in bson_schema:
        json_schema["properties"] = {
            key: bson_to_jsonschema(prop) for key, prop in bson_schema["properties"].items()
        }
    if "items" in bson_schema:
        json_schema["items"] = bson_to_jsonschema(bson_schema["items"])
    if "required" in bson_schema:
        json_schema["required"] = list(bson_schema["required"])
    return json_schema


def validate_document(collection: str, doc: dict) -> bool:
    bson_sch = VALIDATORS.get(collection)
    if not bson_sch:
        return True

    if collection not in _JSON_SCHEMA_CACHE:
        _JSON_SCHEMA_CACHE[collection] = bson_to_jsonschema(bson_sch)
    json_sch = _JSON_SCHEMA_CACHE[collection]

    try:
        jsonschema.validate(instance=doc, schema=json_sch, format_checker=FormatChecker())
    except jsonschema.ValidationError as e:
        raise DocumentValidationError(collection, e.message) from e
    return True
