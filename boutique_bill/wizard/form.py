"""
Invoice Wizard

Holds the draft invoice, the current step and everything derived from the
draft. This is the single place where the draft is mutated.

Flow:
1. SHOP_INFO      → shop name, address, invoice number
2. CUSTOMER_INFO  → customer, phone, invoice and delivery dates
3. SERVICES       → services with measurements and reference images
4. DETAILS        → advance paid, notes
5. PREVIEW        → preview, export, send (terminal)

DESIGN DECISION: Every mutator ends with recompute(). Totals and the
summary message are therefore always in sync with the draft, with no
hidden scheduling.
"""

from typing import Any, Optional

from boutique_bill.config import get_settings
from boutique_bill.models.invoice import (
    Invoice,
    InvoiceTotals,
    Measurement,
    MeasurementName,
    Service,
    StepValidationResult,
)
from boutique_bill.totals import build_summary_message, compute_totals
from boutique_bill.validation import InvoiceStepValidator
from boutique_bill.wizard.steps import STEP_FIELDS, STEP_TITLES, STEPS, Step


INVOICE_FIELDS = frozenset({
    "shop_name",
    "shop_address",
    "shop_logo",
    "invoice_number",
    "invoice_date",
    "delivery_date",
    "customer_name",
    "customer_phone",
    "advance",
    "notes",
})
SERVICE_FIELDS = frozenset({"name", "description", "price", "reference_image"})
MEASUREMENT_FIELDS = frozenset({"name", "value"})


def _apply(target: Any, allowed: frozenset, fields: dict[str, Any]) -> None:
    unknown = set(fields) - allowed
    if unknown:
        raise ValueError(f"Unknown field(s): {', '.join(sorted(unknown))}")
    for name, value in fields.items():
        setattr(target, name, value)


class InvoiceWizard:
    """
    Linear step wizard over one draft invoice.

    advance() only moves forward when the current step's fields validate.
    retreat() always moves back one step without re-validating anything.
    """

    def __init__(
        self,
        invoice: Optional[Invoice] = None,
        validator: Optional[InvoiceStepValidator] = None,
    ):
        self._validator = validator or InvoiceStepValidator()
        self.invoice = invoice or self._new_invoice()
        self.current_step: int = Step.SHOP_INFO
        self.last_validation: Optional[StepValidationResult] = None
        self.totals = InvoiceTotals()
        self.message = ""
        self.recompute()

    @staticmethod
    def _new_invoice() -> Invoice:
        shop = get_settings().shop
        return Invoice(
            shop_name=shop.default_name,
            shop_address=shop.default_address,
        )

    # -------------------------------------------------------------------------
    # Step navigation
    # -------------------------------------------------------------------------

    @property
    def step(self) -> Step:
        return STEPS[self.current_step]

    @property
    def title(self) -> str:
        return STEP_TITLES[self.step]

    @property
    def is_first_step(self) -> bool:
        return self.current_step == 0

    @property
    def is_last_step(self) -> bool:
        return self.current_step == len(STEPS) - 1

    def validate_current_step(self) -> StepValidationResult:
        return self._validator.validate(
            self.invoice,
            STEP_FIELDS[self.step],
            step=self.current_step,
        )

    def advance(self) -> bool:
        """
        Validate the current step and move to the next one.

        Returns True if the step changed. On failure the issues are kept in
        last_validation and the step stays put. On the last step this is a
        no-op.
        """
        if self.is_last_step:
            return False

        result = self.validate_current_step()
        self.last_validation = result
        if result.has_errors:
            return False

        self.current_step += 1
        return True

    def retreat(self) -> bool:
        """Move back one step. No-op on the first step."""
        if self.is_first_step:
            return False
        self.current_step -= 1
        self.last_validation = None
        return True

    def go_to(self, step: int) -> bool:
        """Jump back to an earlier step. Forward jumps are refused."""
        if not 0 <= step < self.current_step:
            return False
        self.current_step = step
        self.last_validation = None
        return True

    def reset(self, invoice: Optional[Invoice] = None) -> None:
        """Discard the draft and start again from the first step."""
        self.invoice = invoice or self._new_invoice()
        self.current_step = Step.SHOP_INFO
        self.last_validation = None
        self.recompute()

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    def recompute(self) -> None:
        """Recompute totals and regenerate the summary message."""
        self.totals = compute_totals(self.invoice)
        self.message = build_summary_message(
            self.invoice,
            self.totals.total,
            self.totals.balance,
        )

    def edit_message(self, text: str) -> None:
        """Hand-edit the message. The next mutation regenerates it."""
        self.message = text

    # -------------------------------------------------------------------------
    # Mutators
    # -------------------------------------------------------------------------

    def update(self, **fields: Any) -> None:
        """Set top-level invoice fields, e.g. update(customer_name="Anjali")."""
        _apply(self.invoice, INVOICE_FIELDS, fields)
        self.recompute()

    def set_logo(self, data_url: Optional[str]) -> None:
        self.update(shop_logo=data_url)

    def add_service(self, service: Optional[Service] = None) -> int:
        """Append a service (blank by default). Returns its index."""
        self.invoice.services.append(service or Service())
        self.recompute()
        return len(self.invoice.services) - 1

    def remove_service(self, index: int) -> bool:
        """Remove a service. The last remaining service cannot be removed."""
        if len(self.invoice.services) <= 1:
            return False
        del self.invoice.services[index]
        self.recompute()
        return True

    def update_service(self, index: int, **fields: Any) -> None:
        _apply(self.invoice.services[index], SERVICE_FIELDS, fields)
        self.recompute()

    def set_reference_image(self, index: int, data_url: Optional[str]) -> None:
        self.update_service(index, reference_image=data_url)

    def add_measurement(
        self,
        service_index: int,
        name: MeasurementName = MeasurementName.LENGTH,
        value: Any = 0,
    ) -> int:
        """Append a measurement to a service. Returns its index."""
        measurements = self.invoice.services[service_index].measurements
        measurements.append(Measurement(name=name, value=value))
        self.recompute()
        return len(measurements) - 1

    def remove_measurement(self, service_index: int, index: int) -> None:
        del self.invoice.services[service_index].measurements[index]
        self.recompute()

    def update_measurement(self, service_index: int, index: int, **fields: Any) -> None:
        measurement = self.invoice.services[service_index].measurements[index]
        _apply(measurement, MEASUREMENT_FIELDS, fields)
        self.recompute()
