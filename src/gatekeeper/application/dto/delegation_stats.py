"""Delegation counters for the administrative UI."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DelegationStats:
    total: int = 0
    active: int = 0
    expired: int = 0
    revoked: int = 0
