"""Tool declaration shared by the handler categories and the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

ADDRESS_PATTERN = r"^secret[a-z0-9]{39}$"
TX_HASH_PATTERN = r"^[A-Fa-f0-9]{64}$"


def address_schema(description: str) -> Dict[str, Any]:
    return {
        "type": "string",
        "description": description,
        "pattern": ADDRESS_PATTERN,
        "minLength": 45,
        "maxLength": 45,
    }


@dataclass(slots=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: Dict[str, Any]
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }
