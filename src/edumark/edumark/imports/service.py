from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from ..core.constants import DEFAULT_IMPORT_ROW_DELAY_SECONDS
from ..core.enums import CsvRowKind
from ..core.exceptions import DomainError, ValidationError
from .csv_parser import CsvValidationResult, validate_csv, validate_rows
from .gateway import AccountGateway, faculty_request, student_request
from .retry.base import RetryPolicy
from .retry.exponential_backoff import ExponentialBackoff

logger = logging.getLogger(__name__)


@dataclass
class UploadResult:
    success: int = 0
    errors: int = 0
    error_details: list[str] = field(default_factory=list)


class CsvImportService:
    """Use case: bulk-create student/faculty accounts from an uploaded CSV.

    Rows are sent to the gateway one at a time, each through the retry policy,
    with a pause between rows to stay under the gateway's rate limit.
    """

    def __init__(
        self,
        gateway: AccountGateway,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        row_delay: float = DEFAULT_IMPORT_ROW_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._gateway = gateway
        self._retry = retry_policy or ExponentialBackoff(sleep=sleep)
        self._row_delay = float(row_delay)
        self._sleep = sleep

    def validate(self, text: str, kind: CsvRowKind | str) -> CsvValidationResult:
        return validate_csv(text, kind)

    def import_rows(self, rows: Sequence[dict[str, str]], kind: CsvRowKind | str) -> UploadResult:
        kind = CsvRowKind(kind)
        checked = validate_rows(rows, kind)
        if not checked.valid:
            raise ValidationError("CSV validation failed", checked.errors)

        build = student_request if kind == CsvRowKind.STUDENT else faculty_request
        label = "Student" if kind == CsvRowKind.STUDENT else "Faculty"
        result = UploadResult()
        total = len(checked.rows)
        logger.info("Starting %s import of %d rows", kind.value, total)

        for index, row in enumerate(checked.rows):
            request = build(row)
            try:
                self._retry.run(lambda: self._gateway.replace_account(request), label=request.external_id)
                result.success += 1
            except DomainError as exc:
                logger.error("Import of %s %s failed: %s", kind.value, request.external_id, exc)
                result.errors += 1
                result.error_details.append(f"{label} {request.external_id}: {exc}")

            if index < total - 1 and self._row_delay > 0:
                self._sleep(self._row_delay)

        logger.info("Import finished: %d created, %d failed", result.success, result.errors)
        return result

    def import_students(self, rows: Sequence[dict[str, str]]) -> UploadResult:
        return self.import_rows(rows, CsvRowKind.STUDENT)

    def import_faculty(self, rows: Sequence[dict[str, str]]) -> UploadResult:
        return self.import_rows(rows, CsvRowKind.FACULTY)

    def import_csv(self, text: str, kind: CsvRowKind | str) -> UploadResult:
        checked = self.validate(text, kind)
        if not checked.valid:
            raise ValidationError("CSV validation failed", checked.errors)
        return self.import_rows(checked.rows, kind)
