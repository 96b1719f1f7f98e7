"""
Conversion service — Varlık İşlem Fişi rows to library catalog rows.

Validates the dataset once, then maps every row through a pure function.
Dataset problems (no rows, missing columns) come back as a failed
ConversionResult; row problems never fail the batch, they fall back to
empty strings and "0.00".

Row flow:
    malzemeAdi "KARMA DİĞER KİTAPLAR-.MARKASIZ-Kelebek Zihinli Çocuk-9786050837933"
        → ISBN "9786050837933", Eser Adı "Kelebek Zihinli Çocuk"
    birimFiyat "1234,56" → Fiyat "1234.56"
    sicilNo / barKod copied as-is
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Sequence, Union

import structlog

from exceptions import EmptyDatasetError, MissingColumnsError, ValidationError
from models.catalog import (
    CatalogRecord,
    InputRecord,
    TitlePolicy,
    REQUIRED_COLUMNS,
    COL_ITEM_NAME,
    COL_REGISTRY_NO,
    COL_BARCODE,
    COL_UNIT_PRICE,
)
from utils.text_utils import cell_to_text

logger = structlog.get_logger(__name__)

ITEM_NAME_DELIMITER = "-"
ISBN_PATTERN = re.compile(r"[0-9]{10}|[0-9]{13}")
FALLBACK_PRICE = "0.00"


# ===================
# RESULT TYPES
# ===================

class ValidationStatus(str, Enum):
    """Outcome of the whole-dataset precondition check."""
    VALID = "VALID"
    EMPTY_DATASET = "EMPTY_DATASET"
    MISSING_COLUMNS = "MISSING_COLUMNS"


class ConversionStage(str, Enum):
    """Batch driver states."""
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    MAPPING = "MAPPING"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass(frozen=True)
class ValidationResult:
    """Tagged result of validate_columns / validate_dataset."""
    status: ValidationStatus
    missing_columns: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.status == ValidationStatus.VALID

    def to_error(self) -> Optional[ValidationError]:
        """Exception equivalent of a failed check (None when valid)."""
        if self.status == ValidationStatus.EMPTY_DATASET:
            return EmptyDatasetError()
        if self.status == ValidationStatus.MISSING_COLUMNS:
            return MissingColumnsError(list(self.missing_columns))
        return None


@dataclass(frozen=True)
class ParsedItemName:
    """ISBN and title recovered from malzemeAdi."""
    isbn: str
    title: str


@dataclass
class ConversionResult:
    """Result of converting one dataset."""
    stage: ConversionStage
    policy: TitlePolicy
    records: list[CatalogRecord] = field(default_factory=list)
    failure: Optional[ValidationResult] = None

    @property
    def success(self) -> bool:
        """True if the dataset was converted."""
        return self.stage == ConversionStage.DONE

    @property
    def row_count(self) -> int:
        return len(self.records)

    def raise_for_failure(self) -> None:
        """Raise EmptyDatasetError / MissingColumnsError for a failed result."""
        if self.failure is not None:
            error = self.failure.to_error()
            if error is not None:
                raise error

    def to_rows(self) -> list[dict[str, str]]:
        """Catalog rows as header -> value dicts."""
        return [r.to_row() for r in self.records]


# ===================
# VALIDATION
# ===================

def validate_columns(columns: Iterable[str]) -> ValidationResult:
    """
    Check that every required Varlık column is present.

    Args:
        columns: Column names of the dataset (or keys of its first row)

    Returns:
        ValidationResult, VALID or MISSING_COLUMNS with the missing names
        in REQUIRED_COLUMNS order
    """
    present = set(columns)
    missing = tuple(col for col in REQUIRED_COLUMNS if col not in present)

    if missing:
        return ValidationResult(ValidationStatus.MISSING_COLUMNS, missing)
    return ValidationResult(ValidationStatus.VALID)


def validate_dataset(records: Sequence[InputRecord]) -> ValidationResult:
    """
    Whole-dataset preconditions: at least one row, required columns present.

    Only the first row is inspected; the reader gives every row the same keys.
    """
    if not records:
        return ValidationResult(ValidationStatus.EMPTY_DATASET)
    return validate_columns(records[0].keys())


# ===================
# ROW MAPPING
# ===================

def split_item_name(value: Any) -> list[str]:
    """Split malzemeAdi on '-' into trimmed parts ("" → [""])."""
    return [part.strip() for part in cell_to_text(value).split(ITEM_NAME_DELIMITER)]


def is_isbn(value: str) -> bool:
    """True for exactly 10 or 13 ASCII digits after trimming."""
    return ISBN_PATTERN.fullmatch(value.strip()) is not None


def parse_item_name(
    value: Any,
    policy: TitlePolicy = TitlePolicy.ISBN_VALIDATED,
) -> ParsedItemName:
    """
    Recover ISBN and title from the composite malzemeAdi field.

    malzemeAdi is "category-subcategory-title-ISBN". Hyphens inside a
    title are not escaped, so such titles get cut at the last hyphen.

    POSITIONAL:
        2+ parts → ISBN = last, title = second to last; 1 part → both empty
    ISBN_VALIDATED:
        last part is 10/13 digits → ISBN = last, title = second to last
            (only with 3+ parts, otherwise empty)
        otherwise → ISBN empty, title = last part (2+ parts) or the whole
            original value (1 part)

    Args:
        value: Raw malzemeAdi cell
        policy: Splitting rule

    Returns:
        ParsedItemName
    """
    original = cell_to_text(value)
    parts = split_item_name(original)
    last = parts[-1]

    if policy == TitlePolicy.POSITIONAL:
        if len(parts) >= 2:
            return ParsedItemName(isbn=last, title=parts[-2])
        return ParsedItemName(isbn="", title="")

    if is_isbn(last):
        title = parts[-2] if len(parts) >= 3 else ""
        return ParsedItemName(isbn=last, title=title)

    title = last if len(parts) >= 2 else original
    return ParsedItemName(isbn="", title=title)


def normalize_price(value: Any) -> str:
    """
    Normalize a Turkish-formatted price to a two-decimal string.

    - "1234,56" → "1234.56"
    - "12.50" → "12.50"
    - "abc" / "" / None → "0.00"

    Only the first comma becomes a decimal point; "." used as a
    thousands separator is not recognised ("1.234,56" → "0.00").
    Parsing and rounding are binary floating point, so "1,005" → "1.00".
    """
    text = cell_to_text(value, default="0").strip().replace(",", ".", 1)

    try:
        amount = float(text)
    except ValueError:
        return FALLBACK_PRICE

    if not math.isfinite(amount) or amount == 0:
        return FALLBACK_PRICE  # zero check drops the sign of "-0,00"

    return f"{amount:.2f}"


def map_record(
    record: InputRecord,
    policy: TitlePolicy = TitlePolicy.ISBN_VALIDATED,
) -> CatalogRecord:
    """Project one Varlık row onto the catalog schema."""
    parsed = parse_item_name(record.get(COL_ITEM_NAME), policy)

    return CatalogRecord(
        isbn=parsed.isbn,
        title=parsed.title,
        registry_number=cell_to_text(record.get(COL_REGISTRY_NO)),
        barcode=cell_to_text(record.get(COL_BARCODE)),
        price=normalize_price(record.get(COL_UNIT_PRICE)),
    )


# ===================
# SERVICE
# ===================

class ConversionService:
    """Batch driver: validate once, map every row, collect."""

    def __init__(self, policy: Union[TitlePolicy, str] = TitlePolicy.ISBN_VALIDATED):
        self.policy = TitlePolicy(policy)

    def validate(self, columns: Iterable[str]) -> ValidationResult:
        """Column check without converting anything."""
        return validate_columns(columns)

    def transform(
        self,
        records: Sequence[InputRecord],
        policy: Union[TitlePolicy, str, None] = None,
    ) -> ConversionResult:
        """
        Convert a whole dataset.

        Args:
            records: Varlık rows in sheet order
            policy: Overrides the service policy for this call

        Returns:
            ConversionResult, DONE with one CatalogRecord per row (same
            order), or FAILED with no records and the validation failure
        """
        active_policy = TitlePolicy(policy) if policy is not None else self.policy
        logger.info(
            "conversion_started",
            row_count=len(records),
            policy=active_policy.value,
        )

        logger.debug("conversion_stage", stage=ConversionStage.VALIDATING.value)
        validation = validate_dataset(records)

        if not validation.is_valid:
            logger.warning(
                "dataset_rejected",
                reason=validation.status.value,
                missing_columns=list(validation.missing_columns),
            )
            return ConversionResult(
                stage=ConversionStage.FAILED,
                policy=active_policy,
                failure=validation,
            )

        logger.debug("conversion_stage", stage=ConversionStage.MAPPING.value)
        converted = [map_record(record, active_policy) for record in records]

        logger.info(
            "conversion_completed",
            row_count=len(converted),
            with_isbn=sum(1 for r in converted if r.isbn),
            zero_price=sum(1 for r in converted if r.price == FALLBACK_PRICE),
        )

        return ConversionResult(
            stage=ConversionStage.DONE,
            policy=active_policy,
            records=converted,
        )


# Singleton instance
_conversion_service: Optional[ConversionService] = None


def get_conversion_service() -> ConversionService:
    """Get or create conversion service instance (policy from settings)."""
    global _conversion_service
    if _conversion_service is None:
        from config import settings
        _conversion_service = ConversionService(settings.title_policy)
    return _conversion_service
