"""Domain models and pure computations for the finance back office.

This package contains in-memory (Pydantic) models for ledger entries,
transaction lines and bill tax fields, together with the balance accumulator
and the tax reconciliation resolver. They are independent from persistence
models so that business logic and testing can evolve without DB coupling.
"""

__all__ = [
    "balance",
    "bill",
    "ledger",
    "tax",
]
