from __future__ import annotations

import io
import json
from datetime import datetime

import qrcode

from ..common.datetime_utils import now_local
from ..core.exceptions import ValidationError
from .model import StudentRecord


class CredentialService:
    """Builds the QR credential a student shows at the mess counter."""

    def __init__(self, *, box_size: int = 10, border: int = 2):
        self._box_size = box_size
        self._border = border

    def build_payload(self, student: StudentRecord, *, now: datetime | None = None) -> str:
        if not student.is_approved:
            raise ValidationError("QR code is available after admin approval")

        return json.dumps(
            {
                "id": str(student.student_id),
                "name": student.name,
                "rollNo": student.roll_no,
                "messName": student.mess_name,
                "email": student.email,
                "hostelName": student.hostel_name,
                "branch": student.branch,
                "timestamp": (now or now_local()).isoformat(timespec="seconds"),
            }
        )

    def render_png(self, student: StudentRecord, *, now: datetime | None = None) -> bytes:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=self._box_size,
            border=self._border,
        )
        qr.add_data(self.build_payload(student, now=now))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
