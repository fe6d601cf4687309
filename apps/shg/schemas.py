"""
Input structures for Self Help Group (SHG) loan tracking.

A group carries the sanction-level terms; members carry the individual
loans actually disbursed. The two are reconciled, never linked.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class InterestSlab:
    """One row of a slab table; ``limit`` is an inclusive upper bound."""

    limit: Any
    rate: Any


@dataclass
class SHGLoan:
    amount: Any
    start_date: Any
    tenure: Any
    rate: Any
    missed_emis: Any = 0
    partial_payments: Any = 0


@dataclass
class SHGMember:
    """A group member; the member owns its loans outright."""

    name: str
    loans: List[SHGLoan] = field(default_factory=list)


@dataclass
class SHGGroup:
    name: str
    sanctioned_amount: Any
    start_date: Any
    tenure: Any
    slabs: List[InterestSlab] = field(default_factory=list)
    manual_rate: Optional[Any] = None
