"""Step wizard package."""

from boutique_bill.wizard.form import InvoiceWizard
from boutique_bill.wizard.steps import STEP_FIELDS, STEP_TITLES, STEPS, Step

__all__ = [
    "InvoiceWizard",
    "STEP_FIELDS",
    "STEP_TITLES",
    "STEPS",
    "Step",
]
