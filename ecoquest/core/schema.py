"""JSON schema definitions for persisted snapshots and zone content.

Snapshot fields are mostly optional: load() fills in defaults for anything
missing, so the schema only rejects values of the wrong type.
"""

LEARNER_SCHEMA = {
    "type": "object",
    "required": ["id"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string"},
        "stars": {"type": "integer", "minimum": 0},
        "score": {"type": "integer", "minimum": 0},
        "zoneProgress": {
            "type": "object",
            "additionalProperties": {"type": "boolean"}
        },
        "avatar": {"type": "object"},
        "updatedAt": {"type": "number"}
    }
}

SNAPSHOT_SCHEMA = {
    "type": "object",
    "properties": {
        "readAloud": {"type": "boolean"},
        "projectorMode": {"type": "boolean"},
        "className": {"type": "string"},
        "teacherMission": {"type": "string", "minLength": 1},
        "activeStudentId": {"type": "string"},
        "students": {"type": "array", "items": LEARNER_SCHEMA}
    }
}

SCENE_SCHEMA = {
    "type": "object",
    "required": ["type"],
    "properties": {
        "type": {"type": "string", "enum": ["story", "sorter", "travel", "energy"]},
        "who": {"type": "string"},
        "avatar": {"type": "string"},
        "text": {"type": "string"},
        "why": {"type": "string"},
        "theme": {"type": "string", "minLength": 1}
    }
}

ZONES_SCHEMA = {
    "type": "object",
    "required": ["zones"],
    "properties": {
        "zones": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["id", "name", "scenes"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "name": {"type": "string"},
                    "icon": {"type": "string"},
                    "description": {"type": "string"},
                    "requires": {"type": ["string", "null"]},
                    "scenes": {"type": "array", "minItems": 1, "items": SCENE_SCHEMA}
                }
            }
        }
    }
}

THEMES_SCHEMA = {
    "type": "object",
    "required": ["sorter", "energy", "travel"],
    "properties": {
        "sorter": {
            "type": "object",
            "required": ["categories", "base"],
            "properties": {
                "categories": {"type": "array", "minItems": 1, "items": {"type": "string"}},
                "base": {"type": "array", "items": {"$ref": "#/definitions/sortItem"}},
                "themes": {
                    "type": "object",
                    "additionalProperties": {"type": "array", "items": {"$ref": "#/definitions/sortItem"}}
                }
            }
        },
        "energy": {
            "type": "object",
            "required": ["base"],
            "properties": {
                "base": {"type": "array", "items": {"$ref": "#/definitions/device"}},
                "themes": {
                    "type": "object",
                    "additionalProperties": {"type": "array", "items": {"$ref": "#/definitions/device"}}
                }
            }
        },
        "travel": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["prompt", "options"],
                "properties": {
                    "prompt": {"type": "string"},
                    "options": {
                        "type": "array",
                        "minItems": 1,
                        "items": {
                            "type": "object",
                            "required": ["label", "good"],
                            "properties": {
                                "label": {"type": "string"},
                                "good": {"type": "boolean"}
                            }
                        }
                    }
                }
            }
        }
    },
    "definitions": {
        "sortItem": {
            "type": "object",
            "required": ["id", "name", "type"],
            "properties": {
                "id": {"type": "string"},
                "name": {"type": "string"},
                "type": {"type": "string"},
                "emoji": {"type": "string"}
            }
        },
        "device": {
            "type": "object",
            "required": ["id", "name"],
            "properties": {
                "id": {"type": "string"},
                "name": {"type": "string"},
                "emoji": {"type": "string"},
                "on": {"type": "boolean"},
                "mustEndOn": {"type": "boolean"}
            }
        }
    }
}
