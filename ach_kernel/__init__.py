"""
ACH Kernel

Assembles, validates, serializes and parses NACHA payment files:
- Fixed-width record codec for all six record types
- Batching by standard entry class with sequential batch numbers
- Derived control totals (counts, entry hash, debit/credit totals)
- Block padding to a multiple of ten lines
"""

__version__ = "0.1.0"
