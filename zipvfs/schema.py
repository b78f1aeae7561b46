"""
JSON schema for filesystem trees exported by ZipFS.snapshot().
"""
from typing import Any, Dict, Optional
import logging

import jsonschema

logger = logging.getLogger(__name__)

FS_NODE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "type": {"type": "string", "enum": ["dir", "file"]},
        "name": {"type": "string"},
        "children": {
            "type": "array",
            "items": {"$ref": "#"},
        },
        "size": {"type": "integer", "minimum": 0},
        "modified": {"type": "string"},
    },
    "required": ["type", "name"],
    "additionalProperties": False,
}

FS_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "$id": "zipvfs.filesystem.schema.json",
    **FS_NODE_SCHEMA,
}


def validate_tree(tree: Dict[str, Any], schema: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Validate ``tree`` against the filesystem schema and return it.
    Raises ``jsonschema.ValidationError`` on mismatch.
    """
    jsonschema.validate(instance=tree, schema=schema or FS_SCHEMA)
    return tree


def is_valid_tree(tree: Any) -> bool:
    try:
        validate_tree(tree)
    except jsonschema.ValidationError as e:
        logger.debug("Filesystem tree failed schema validation: %s", e.message)
        return False
    return True
