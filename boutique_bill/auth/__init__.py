"""Demo login package."""

from boutique_bill.auth.service import AuthService

__all__ = ["AuthService"]
