"""Soft expiry - mark lapsed delegations on the read path."""

import logging
from dataclasses import replace
from datetime import datetime

from gatekeeper.application.ports import UnitOfWork
from gatekeeper.domain.entities import (
    Delegation,
    DelegationEndReason,
    is_active,
    is_lapsed,
)

logger = logging.getLogger(__name__)


async def settle(uow: UnitOfWork, delegation: Delegation, now: datetime) -> Delegation:
    """Return the delegation as of `now`, marking it expired if it has lapsed."""
    if not is_lapsed(delegation, now):
        return delegation
    if await uow.delegations.mark_expired(delegation.id, now):
        logger.info("Delegation %s expired (detected at %s)", delegation.id, now.isoformat())
        return replace(delegation, revoked_at=now, end_reason=DelegationEndReason.EXPIRED)
    # Someone else marked it first.
    current = await uow.delegations.get_by_id(delegation.id)
    return current or delegation


async def active_only(
    uow: UnitOfWork, delegations: list[Delegation], now: datetime
) -> list[Delegation]:
    """Settle each delegation and keep the active ones."""
    active = []
    for delegation in delegations:
        delegation = await settle(uow, delegation, now)
        if is_active(delegation, now):
            active.append(delegation)
    return active
