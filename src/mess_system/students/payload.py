"""Schema for the JSON text carried by a student's QR credential."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import InvalidPayloadError


class QRPayload(BaseModel):
    """Identity fields RosterLookup checks against the roster.

    Extra keys written by the credential generator (id, hostelName, branch,
    timestamp) are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    email: StrictStr = Field(..., description="Registered email")
    name: StrictStr = Field(..., description="Full name as registered")
    roll_no: StrictStr = Field(..., alias="rollNo", description="Roll number")
    mess_name: StrictStr = Field(..., alias="messName", description="Assigned mess")


def parse_payload(raw: str) -> QRPayload:
    try:
        return QRPayload.model_validate_json(raw)
    except PydanticValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) or "payload" for err in e.errors()})
        raise InvalidPayloadError(f"Invalid QR code - bad fields: {', '.join(fields)}") from e
