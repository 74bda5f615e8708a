"""
Adaptive Budget - Source Package

An adaptive budgeting engine for gig workers with irregular income.
It turns a raw transaction history into a per-category spending plan,
watches how fast each category is being consumed, sizes an emergency
buffer from income volatility, and reports how far the plan can be trusted.

DESIGN PRINCIPLES:
1. The engine is a pure function of (transactions, current buffer, clock)
2. No data is never an error - it is a low-confidence plan
3. Caller errors are rejected before any I/O happens
4. Every request is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Adaptive Budget Team"
