"""
Core Data Models for BoutiqueBill

These models define the schemas for the invoice draft and everything
derived from it. They are designed to:
1. Coerce raw form input (strings, blanks) into usable values
2. Stay lenient while the user is still typing
3. Leave required-field checks to the step validator

DESIGN DECISION: The Invoice is a DRAFT. Assignments are validated and
coerced (validate_assignment=True) but emptiness and length are never
rejected here.
The wizard decides, step by step, which fields must be filled in.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


ZERO = Decimal("0")
# Largest amount accepted anywhere; beyond this input is treated as invalid
MAX_AMOUNT = Decimal("999999999999.99")


def coerce_amount(value: Any) -> Decimal:
    """
    Coerce raw numeric input into a Decimal.

    Empty, missing, non-numeric or absurdly large input (beyond
    MAX_AMOUNT either way) becomes 0. Negative numbers are kept so the
    validator can report them.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        text = str(value).strip()
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            return ZERO
    if not result.is_finite() or result.copy_abs() > MAX_AMOUNT:
        return ZERO
    return result


def generate_invoice_number(on: Optional[date] = None) -> str:
    """Format: INV-YYYYMMDD-XXXX"""
    on = on or date.today()
    return f"INV-{on:%Y%m%d}-{uuid4().hex[:4].upper()}"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class MeasurementName(str, Enum):
    """
    Body measurements a tailor records.

    The values are the labels shown to the user.
    """
    LENGTH = "Length"
    CHEST = "Chest"
    WAIST = "Waist"
    HIP = "Hip"
    SHOULDER = "Shoulder"
    SLEEVE_LENGTH = "Sleeve Length"
    SLEEVE_OPENING = "Sleeve Opening"
    ARMHOLE = "Armhole"
    NECK_FRONT = "Neck Front"
    NECK_BACK = "Neck Back"


class IssueSeverity(str, Enum):
    """Validation issue severity. Only errors block a step."""
    ERROR = "error"
    WARNING = "warning"


# =============================================================================
# INVOICE DRAFT
# =============================================================================

class Measurement(BaseModel):
    """A single measurement taken for a service."""
    model_config = ConfigDict(validate_assignment=True)

    name: MeasurementName = Field(
        default=MeasurementName.LENGTH,
        description="Which measurement this is"
    )
    value: Decimal = Field(
        default=ZERO,
        description="Measured value (non-negative)"
    )

    @field_validator('value', mode='before')
    @classmethod
    def coerce_value(cls, v: Any) -> Decimal:
        return coerce_amount(v)


class Service(BaseModel):
    """
    One tailoring service on the invoice, e.g. "Blouse Stitching".

    Measurements and the reference image are specific to the garment
    this service is for.
    """
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    name: str = Field(
        default="",
        description="Service name (required before leaving the services step)"
    )
    description: Optional[str] = Field(
        default=None,
        description="Optional detail, e.g. 'with lining'"
    )
    price: Decimal = Field(
        default=ZERO,
        description="Price of the service"
    )
    measurements: list[Measurement] = Field(default_factory=list)
    reference_image: Optional[str] = Field(
        default=None,
        description="Reference image as a data URL"
    )

    @field_validator('price', mode='before')
    @classmethod
    def coerce_price(cls, v: Any) -> Decimal:
        return coerce_amount(v)

    @field_validator('description', 'reference_image', mode='before')
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Invoice(BaseModel):
    """
    The invoice being built by the wizard.

    CRITICAL: This is an in-progress record. A value being present here
    does NOT mean it passed validation.
    """
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    invoice_id: UUID = Field(
        default_factory=uuid4,
        description="Unique ID of this draft"
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the draft was started"
    )

    # Shop
    shop_name: str = ""
    shop_address: str = ""
    shop_logo: Optional[str] = Field(
        default=None,
        description="Shop logo as a data URL"
    )

    # Invoice metadata
    invoice_number: str = Field(default_factory=generate_invoice_number)
    invoice_date: Optional[date] = Field(default_factory=date.today)
    delivery_date: Optional[date] = Field(default_factory=date.today)

    # Customer
    customer_name: str = ""
    customer_phone: str = ""

    # Line items
    services: list[Service] = Field(default_factory=lambda: [Service()])

    # Payment
    advance: Decimal = Field(
        default=ZERO,
        description="Advance already paid by the customer"
    )
    notes: Optional[str] = Field(
        default=None,
        description="Special instructions"
    )

    @field_validator('advance', mode='before')
    @classmethod
    def coerce_advance(cls, v: Any) -> Decimal:
        return coerce_amount(v)

    @field_validator('shop_logo', 'notes', mode='before')
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('invoice_date', 'delivery_date', mode='before')
    @classmethod
    def blank_date_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        if isinstance(v, datetime):
            return v.date()
        return v


class InvoiceTotals(BaseModel):
    """
    Values derived from the services and the advance.

    Balance may be negative: an overpaid invoice is a valid state.
    """

    total: Decimal = ZERO
    advance: Decimal = ZERO
    balance: Decimal = ZERO


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found on a field."""

    field: str = Field(
        ...,
        description="Field path with the issue (e.g. 'services.0.name')"
    )
    issue_type: str = Field(
        ...,
        description="Kind of issue (e.g. 'missing', 'too_short', 'negative')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: IssueSeverity = Field(
        default=IssueSeverity.ERROR,
        description="Issue severity"
    )


class StepValidationResult(BaseModel):
    """Result of validating the fields of one wizard step."""

    step: int = Field(..., ge=0)
    validated_at: datetime = Field(
        default_factory=datetime.utcnow
    )
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == IssueSeverity.ERROR for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == IssueSeverity.ERROR)

    @property
    def warnings(self) -> list[str]:
        return [
            issue.message for issue in self.issues
            if issue.severity == IssueSeverity.WARNING
        ]

    def errors_by_field(self) -> dict[str, list[str]]:
        """Map each failing field to its error kinds."""
        errors: dict[str, list[str]] = {}
        for issue in self.issues:
            if issue.severity == IssueSeverity.ERROR:
                errors.setdefault(issue.field, []).append(issue.issue_type)
        return errors

    def message_for(self, field: str) -> Optional[str]:
        """First error message for a field, for inline display."""
        for issue in self.issues:
            if issue.field == field and issue.severity == IssueSeverity.ERROR:
                return issue.message
        return None


# =============================================================================
# IMAGE MODELS
# =============================================================================

class StoredImage(BaseModel):
    """A logo or reference image, decoded, downscaled and ready to embed."""

    image_id: UUID = Field(default_factory=uuid4)
    original_filename: str
    mime_type: str
    width: int = Field(ge=1)
    height: int = Field(ge=1)
    size_bytes: int = Field(ge=0, description="Size of the stored (re-encoded) image")
    data_url: str = Field(..., description="base64 data URL")

    @field_validator('mime_type')
    @classmethod
    def validate_mime_type(cls, v: str) -> str:
        """Only allow image types."""
        allowed = {'image/jpeg', 'image/png', 'image/webp'}
        if v.lower() not in allowed:
            raise ValueError(f"Unsupported image type: {v}. Allowed: {allowed}")
        return v.lower()


class AuthenticatedUser(BaseModel):
    """The user restored from (or written to) local storage."""

    email: str = Field(..., min_length=1)
