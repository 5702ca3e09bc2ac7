"""
Text normalization helpers.

Accent stripping and sanitizers shared by the directory, username and
identity code.

Dependencies: unicodedata (stdlib)
System role: String normalization utilities
"""

import re
import unicodedata


def strip_accents(value: str) -> str:
    """Remove combining marks: 'Áñez' -> 'Anez'."""
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def normalize_for_comparison(value: str) -> str:
    """Accent-free, lowercase, without whitespace."""
    return re.sub(r"\s+", "", strip_accents(value or "").lower())


def sanitize_ci(ci: str) -> str:
    """Keep only the digits of an identity card number."""
    return re.sub(r"[^0-9]", "", ci or "")


def mask_email(email: str) -> str:
    """'jperez@uniss.edu.cu' -> 'jp****@uniss.edu.cu'."""
    local, sep, domain = email.partition("@")
    if not sep:
        return email
    visible = local[:2]
    return f"{visible}{'*' * max(len(local) - len(visible), 1)}@{domain}"
