"""
BoutiqueBill - Source Package

A small invoicing assistant for boutique tailoring shops.

DESIGN PRINCIPLES:
1. One draft invoice per session, mutated in one place
2. Validate at the step boundary, never silently fix input
3. Derived values are recomputed, never stored by hand
4. Every user action is auditable
"""

__version__ = "1.0.0"
__author__ = "BoutiqueBill Team"
