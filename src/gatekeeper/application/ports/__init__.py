"""Application ports - interfaces for external adapters."""

from gatekeeper.application.ports.clock import Clock
from gatekeeper.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "Clock",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
