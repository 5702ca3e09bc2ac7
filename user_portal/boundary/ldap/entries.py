"""
Directory entry value object.

Normalizes ldap3 response dicts into plain string lists so services never
touch raw bytes or ldap3 types.

Dependencies: None
System role: LDAP result representation
"""

from dataclasses import dataclass, field
from typing import Any

# userAccountControl flag for a disabled account
ACCOUNTDISABLE = 0x2


def _to_text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


@dataclass
class DirectoryEntry:
    """A single search result: DN plus multi-valued attributes."""

    dn: str
    attributes: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_response(cls, item: dict[str, Any]) -> "DirectoryEntry":
        attributes: dict[str, list[str]] = {}
        for name, value in (item.get("attributes") or {}).items():
            if value is None or value == []:
                continue
            values = value if isinstance(value, (list, tuple)) else [value]
            attributes[name] = [_to_text(v) for v in values]
        return cls(dn=item.get("dn", ""), attributes=attributes)

    def get(self, name: str, default: str = "") -> str:
        """First value of an attribute, matched case-insensitively."""
        values = self.get_all(name)
        return values[0] if values else default

    def get_all(self, name: str) -> list[str]:
        if name in self.attributes:
            return self.attributes[name]
        lowered = name.lower()
        for key, values in self.attributes.items():
            if key.lower() == lowered:
                return values
        return []

    @property
    def account_enabled(self) -> bool:
        raw = self.get("userAccountControl")
        if not raw:
            return True
        try:
            return not int(raw) & ACCOUNTDISABLE
        except ValueError:
            return True
