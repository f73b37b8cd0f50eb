"""Validation and construction of delivery jobs from user input."""

from __future__ import annotations

from typing import Sequence

from ...config import settings
from ...errors import DuplicatePostalCodeError, IllegalInputError, InvalidJobSizeError, InvalidPostalCodeError
from ...models.domain import Catalog, Job


def _parse_int(text: str | int) -> int:
    if isinstance(text, bool):
        raise IllegalInputError(f"Expected a whole number, got {text!r}.")
    if isinstance(text, int):
        return text
    try:
        return int(str(text).strip())
    except ValueError as exc:
        raise IllegalInputError(f"Expected a whole number, got {text!r}.") from exc


class JobRequestBuilder:
    """Builds jobs whose size and postal codes are valid for ``catalog``.

    ``max_job_size`` is a deployment choice: pass it explicitly, or leave it to
    ``settings`` (a fixed limit, or the catalog size when the limit is off).
    """

    def __init__(self, catalog: Catalog, max_job_size: int | None = None) -> None:
        self.catalog = catalog
        self.max_job_size = max_job_size if max_job_size is not None else settings.max_job_size(catalog)
        if self.max_job_size < 1:
            raise ValueError(f"max_job_size must be at least 1, got {self.max_job_size}.")

    @property
    def max_postal_code(self) -> int:
        return self.catalog.max_postal_code

    def parse_size(self, text: str | int) -> int:
        size = _parse_int(text)
        if not 1 <= size <= self.max_job_size:
            raise InvalidJobSizeError(f"Job size must be between 1 and {self.max_job_size}, got {size}.")
        return size

    def parse_postal_code(self, text: str | int) -> int:
        code = _parse_int(text)
        if not 1 <= code <= self.max_postal_code:
            raise InvalidPostalCodeError(
                f"Postal code must be between 1 and {self.max_postal_code}, got {code}."
            )
        return code

    def build(self, postal_codes: Sequence[str | int]) -> Job:
        self.parse_size(len(postal_codes))
        codes: list[int] = []
        for raw in postal_codes:
            code = self.parse_postal_code(raw)
            if code in codes:
                raise DuplicatePostalCodeError(f"Postal code {code} appears more than once in the job.")
            codes.append(code)
        return Job.from_postal_codes(self.catalog, codes)
