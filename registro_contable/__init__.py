"""
Registro Contable - Source Package

A personal bookkeeping form for a single user: income, expense and
support ("apoyo") entries, a running balance, CSV export and
HTML receipts for support entries.

DESIGN PRINCIPLES:
1. The record store is the only source of truth
2. The local record set is always a full snapshot, never patched
3. Invalid input never reaches the store
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Registro Contable Team"
