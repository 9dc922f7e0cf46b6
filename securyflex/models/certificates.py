"""In-memory certificate record as handed over by the certificate store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from securyflex.core.errors import InvalidRangeError
from securyflex.models.enums import CertificateType


@dataclass(frozen=True)
class Certificate:
    id: str
    category: CertificateType
    holder_id: str
    issuing_authority: str
    issue_date: datetime
    expiration_date: datetime
    authorizations: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.issue_date >= self.expiration_date:
            raise InvalidRangeError(self.issue_date, self.expiration_date)
        # Accept plain strings ("WPBR") and lists from deserialized payloads
        if not isinstance(self.category, CertificateType):
            object.__setattr__(self, "category", CertificateType(str(self.category).upper()))
        if not isinstance(self.authorizations, tuple):
            object.__setattr__(self, "authorizations", tuple(self.authorizations))
