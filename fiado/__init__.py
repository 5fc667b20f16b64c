"""
Fiado Digital - Source Package

A credit-book ("caderneta de fiado") for small local shops: customers,
a product catalog and an append-only list of purchases on credit and
payments.

DESIGN PRINCIPLES:
1. Balances are derived from the transaction log, never stored
2. Invalid input is rejected before any record exists
3. Every mutation is immediately durable
4. Historical line items never change when the catalog does
5. Storage layer is swappable
"""

__version__ = "1.3.0"
__author__ = "Fiado Digital Team"
