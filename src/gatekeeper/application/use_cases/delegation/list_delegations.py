"""List delegations and delegation statistics."""

from gatekeeper.application.dto.delegation_stats import DelegationStats
from gatekeeper.application.ports import Clock
from gatekeeper.application.use_cases.delegation.expiry import active_only, settle
from gatekeeper.domain.entities import Delegation


class ListDelegationsUseCase:
    """Delegations by delegatee or delegator, plus counters."""

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def for_delegatee(self, user_id: str) -> list[Delegation]:
        """Currently active delegations to user_id."""
        now = self._clock.now()
        async with self._uow_factory() as uow:
            rows = await uow.delegations.list_unrevoked_by_delegatee(user_id)
            return await active_only(uow, rows, now)

    async def for_delegator(
        self, user_id: str, include_inactive: bool = False
    ) -> list[Delegation]:
        """Delegations created by user_id, newest first."""
        now = self._clock.now()
        async with self._uow_factory() as uow:
            rows = await uow.delegations.list_by_delegator(user_id)
            if include_inactive:
                return [await settle(uow, d, now) for d in rows]
            return await active_only(uow, rows, now)

    async def stats(self, user_id: str | None = None) -> DelegationStats:
        """Counts of total/active/expired/revoked delegations.

        With user_id, counts delegations where the user is either party.
        """
        async with self._uow_factory() as uow:
            return await uow.delegations.stats(self._clock.now(), user_id)
