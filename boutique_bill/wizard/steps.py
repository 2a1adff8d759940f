"""
Wizard steps and the fields each one validates.

The steps are strictly linear. A step's fields are checked when the user
tries to leave it; the preview step has nothing to check.
"""

from enum import IntEnum


class Step(IntEnum):
    SHOP_INFO = 0
    CUSTOMER_INFO = 1
    SERVICES = 2
    DETAILS = 3
    PREVIEW = 4


STEPS: tuple[Step, ...] = tuple(Step)

STEP_TITLES: dict[Step, str] = {
    Step.SHOP_INFO: "Shop Info",
    Step.CUSTOMER_INFO: "Customer Info",
    Step.SERVICES: "Services & Measurements",
    Step.DETAILS: "Notes & Payment",
    Step.PREVIEW: "Preview & Send",
}

STEP_FIELDS: dict[Step, tuple[str, ...]] = {
    Step.SHOP_INFO: ("shop_name", "shop_address", "invoice_number"),
    Step.CUSTOMER_INFO: ("customer_name", "customer_phone", "invoice_date", "delivery_date"),
    Step.SERVICES: ("services",),
    Step.DETAILS: ("advance", "notes"),
    Step.PREVIEW: (),
}
