from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import BinaryIO, Callable, Optional

from ..common.datetime_utils import now_local
from ..core.enums import MealPeriod, ScanOutcome
from ..core.exceptions import (
    DataMismatchError,
    DecodeError,
    InvalidPayloadError,
    StorageError,
    StudentNotFoundError,
)
from ..meals.classifier import MealWindowClassifier
from ..students.payload import parse_payload
from ..students.roster import RosterLookup
from .decoder import decode_qr_image
from .ledger import AttendanceLedger
from .model import ScanResult

logger = logging.getLogger(__name__)

Decoder = Callable[[BinaryIO], str]


class ScanService:
    """Use case: turn one scanned QR text into an attendance result.

    payload -> roster lookup -> meal window -> ledger. Every failure comes
    back as a ScanResult; nothing here raises to the caller.
    """

    def __init__(
        self,
        roster: RosterLookup,
        classifier: MealWindowClassifier,
        ledger: AttendanceLedger,
        *,
        decoder: Decoder = decode_qr_image,
    ):
        self._roster = roster
        self._classifier = classifier
        self._ledger = ledger
        self._decoder = decoder

    @property
    def classifier(self) -> MealWindowClassifier:
        return self._classifier

    def current_period(self, *, now: datetime | None = None) -> MealPeriod:
        return self._classifier.classify(now or now_local())

    def process(self, raw: str, *, now: datetime | None = None) -> ScanResult:
        now = now or now_local()

        try:
            student = self._roster.lookup(parse_payload(raw))
        except InvalidPayloadError as e:
            return ScanResult(ScanOutcome.DATA_MISMATCH, str(e), timestamp=now)
        except StudentNotFoundError as e:
            return ScanResult(ScanOutcome.NOT_FOUND, str(e), timestamp=now)
        except DataMismatchError as e:
            return ScanResult(ScanOutcome.DATA_MISMATCH, str(e), timestamp=now)
        except StorageError:
            logger.exception("Roster lookup failed")
            return ScanResult(ScanOutcome.STORAGE_FAILURE, "Could not read student records", timestamp=now)

        meal_type = self._classifier.classify(now).meal_type
        if meal_type is None:
            return ScanResult(
                ScanOutcome.NOT_MEAL_TIME,
                "Not currently meal time. Attendance not recorded.",
                student=student,
                timestamp=now,
            )

        try:
            outcome = self._ledger.record_attendance(student, meal_type, now)
        except StorageError:
            logger.exception("Recording %s for %s failed", meal_type.value, student.roll_no)
            return ScanResult(
                ScanOutcome.STORAGE_FAILURE,
                "Failed to record attendance",
                student=student,
                meal_type=meal_type,
                timestamp=now,
            )

        if outcome == ScanOutcome.DUPLICATE:
            message = "Student already recorded for this meal"
        else:
            message = f"{student.name} successfully recorded for {meal_type.value} at {now.strftime('%H:%M:%S')}"
        return ScanResult(outcome, message, student=student, meal_type=meal_type, timestamp=now)

    def decode(self, stream: BinaryIO) -> str:
        return self._decoder(stream)

    def process_image(self, stream: BinaryIO, *, now: datetime | None = None) -> ScanResult:
        """One-shot upload: decode the image, then process its text."""

        try:
            raw = self._decoder(stream)
        except DecodeError as e:
            return ScanResult(ScanOutcome.DECODE_FAILURE, str(e), timestamp=now or now_local())
        return self.process(raw, now=now)


class ScanSession:
    """The counter's camera scanner, which the operator can stop at any time.

    Decoding happens outside any lock. A decode that finishes after the
    session was stopped (or restarted) is dropped before it reaches the
    ledger. Like the camera widget it models, the session closes itself
    after the first frame that yields a QR text.
    """

    def __init__(self, service: ScanService):
        self._service = service
        self._lock = threading.Lock()
        self._generation = 0
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> int:
        with self._lock:
            self._generation += 1
            self._active = True
            logger.info("Scan session %d started", self._generation)
            return self._generation

    def stop(self) -> None:
        with self._lock:
            if self._active:
                logger.info("Scan session %d stopped", self._generation)
            self._active = False

    def _claim(self, generation: int) -> bool:
        """Close the session for this frame; False if it is no longer current."""

        with self._lock:
            if not self._active or self._generation != generation:
                return False
            self._active = False
            return True

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return self._active and self._generation == generation

    def submit_text(self, raw: str, *, now: datetime | None = None) -> Optional[ScanResult]:
        with self._lock:
            generation = self._generation
        if not self._claim(generation):
            return None
        return self._service.process(raw, now=now)

    def submit_frame(self, stream: BinaryIO, *, now: datetime | None = None) -> Optional[ScanResult]:
        with self._lock:
            if not self._active:
                return None
            generation = self._generation

        try:
            raw = self._service.decode(stream)
        except DecodeError as e:
            if not self._is_current(generation):
                return None
            return ScanResult(ScanOutcome.DECODE_FAILURE, str(e), timestamp=now or now_local())

        if not self._claim(generation):
            logger.info("Dropping frame decoded after session %d ended", generation)
            return None
        return self._service.process(raw, now=now)
