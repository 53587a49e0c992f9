from __future__ import annotations

import json
from pathlib import Path

SAMPLE_STRUCTS = {
    "structs": [
        {
            "name": "User",
            "fields": [
                {"name": "Active", "type": "bool"},
                {"name": "ID", "type": "uint64"},
                {"name": "Verified", "type": "bool"},
                {"name": "Name", "type": "string"},
                {"name": "Age", "type": "uint8"},
                {"name": "Email", "type": "string"},
            ],
        },
        {
            "name": "Node",
            "fields": [
                {"name": "Value", "type": "int64"},
                {"name": "Left", "type": "pointer"},
                {"name": "Right", "type": "pointer"},
                {"name": "Data", "type": "string"},
            ],
        },
        {
            "name": "Document",
            "fields": [
                {"name": "Version", "type": "uint32"},
                {"name": "Title", "type": "string"},
                {"name": "Published", "type": "bool"},
                {"name": "Content", "type": "slice"},
                {"name": "Meta", "type": "interface"},
                {"name": "Flags", "type": "uint16"},
                {"name": "Handlers", "type": "map"},
                {"name": "Tags", "type": "slice"},
                {"name": "Score", "type": "float32"},
                {"name": "Done", "type": "chan"},
            ],
        },
    ]
}


def generate_sample_data(out_dir: Path) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / "structs.json"
    path.write_text(json.dumps(SAMPLE_STRUCTS, indent=2), encoding="utf-8")
    return path
