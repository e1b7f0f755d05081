#!/usr/bin/env python3
"""Coffer document - The decrypted name -> secret mapping and its JSON envelope."""

import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import MalformedDocument


@dataclass
class Coffer:
    """In-memory contents of a coffer."""

    secrets: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, data: bytes) -> "Coffer":
        """Parse a decrypted coffer.

        Args:
            data: UTF-8 JSON of the form {"secrets": {name: value, ...}}

        Returns:
            Coffer object

        Raises:
            MalformedDocument: If the payload is not JSON of that shape

        """
        try:
            obj = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedDocument(f"Failed to unmarshal JSON to struct: {e}") from e

        if not isinstance(obj, dict) or not isinstance(obj.get("secrets"), dict):
            raise MalformedDocument("Failed to unmarshal JSON to struct: missing secrets object")

        secrets = obj["secrets"]
        for name, value in secrets.items():
            if not isinstance(value, str):
                raise MalformedDocument(f"Failed to unmarshal JSON to struct: secret `{name}` is not a string")

        return cls(secrets=dict(secrets))

    def serialize(self) -> bytes:
        """Encode as compact JSON with sorted names."""
        return json.dumps(
            {"secrets": self.secrets},
            separators=(",", ":"),
            sort_keys=True,
        ).encode("utf-8")

    def set(self, name: str, value: str) -> None:
        self.secrets[name] = value

    def delete(self, name: str) -> None:
        self.secrets.pop(name, None)

    def get(self, name: str) -> Optional[str]:
        return self.secrets.get(name)

    def names(self) -> List[str]:
        return list(self.secrets)

    def __contains__(self, name) -> bool:
        return name in self.secrets

    def __len__(self) -> int:
        return len(self.secrets)
