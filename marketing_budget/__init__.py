"""
Marketing Budget - Source Package

Pricing, validation and change-audit engine for property marketing budgets.

DESIGN PRINCIPLES:
1. Prices come from the catalogue unless a human overrides them
2. Approval is gated, every other move is not
3. No silent corrections to budgets
4. Every write is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Marketing Budget Team"
