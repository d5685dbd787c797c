"""Single-delegation reads: lookup and validity check."""

import logging
from uuid import UUID

from gatekeeper.application.ports import Clock
from gatekeeper.application.use_cases.delegation.expiry import settle
from gatekeeper.domain.entities import Delegation, is_active
from gatekeeper.domain.exceptions import DelegationNotFound

logger = logging.getLogger(__name__)


class GetDelegationUseCase:
    """Get a delegation by id, with soft expiry applied."""

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def execute(self, delegation_id: UUID) -> Delegation:
        async with self._uow_factory() as uow:
            delegation = await uow.delegations.get_by_id(delegation_id)
            if not delegation:
                raise DelegationNotFound(delegation_id)
            return await settle(uow, delegation, self._clock.now())

    async def is_valid(self, delegation_id: UUID) -> bool:
        """True iff the delegation exists and is active right now.

        A lapsed delegation is marked expired before False is returned.
        """
        now = self._clock.now()
        async with self._uow_factory() as uow:
            delegation = await uow.delegations.get_by_id(delegation_id)
            if not delegation:
                logger.debug("Validity check for unknown delegation %s", delegation_id)
                return False
            delegation = await settle(uow, delegation, now)
        return is_active(delegation, now)
