"""
Opaque document identifiers
"""

import secrets
from typing import Any, Optional

# Generated identifiers are 12 random bytes, hex encoded
ID_BYTES = 12


class DocumentId(str):
    """Opaque identifier naming a single document.

    Identifiers compare by plain string equality. Client supplied values are
    kept verbatim, so ``DocumentId("aaaaaaaaaaaa")`` is as valid as a
    generated one.
    """

    def __new__(cls, value: Any) -> "DocumentId":
        value = str(value)
        if not value:
            raise ValueError("Document identifier cannot be empty")
        return super().__new__(cls, value)

    @classmethod
    def generate(cls) -> "DocumentId":
        return cls(secrets.token_hex(ID_BYTES))

    def __repr__(self) -> str:
        return f"DocumentId({str.__repr__(self)})"


def coerce_document_id(value: Optional[Any]) -> DocumentId:
    """Return ``value`` as a DocumentId, generating a new one when it is missing"""
    if value is None or value == "":
        return DocumentId.generate()
    return DocumentId(value)
