"""Permission resolver - effective permissions of a user."""

from datetime import datetime

from gatekeeper.application.dto.effective_permissions import EffectivePermissions
from gatekeeper.application.ports import Clock, UnitOfWork
from gatekeeper.application.use_cases.delegation.expiry import active_only
from gatekeeper.domain.entities import Permission
from gatekeeper.domain.value_objects import Grant


class ResolvePermissionsUseCase:
    """Union of permissions from direct roles and active delegations.

    Computed fresh on every call. Cost is proportional to the user's direct
    roles plus unrevoked delegations, never to delegation history.
    """

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def execute(self, user_id: str) -> EffectivePermissions:
        async with self._uow_factory() as uow:
            return await self.resolve(uow, user_id)

    async def resolve(
        self, uow: UnitOfWork, user_id: str, now: datetime | None = None
    ) -> EffectivePermissions:
        """Resolve within an open unit of work."""
        now = now or self._clock.now()
        grants: dict[Permission, list[Grant]] = {}

        for role in await uow.user_roles.list_roles_for_user(user_id):
            for permission in await uow.roles.get_permissions(role.id):
                grants.setdefault(permission, []).append(Grant.direct(role.id))

        pending = await uow.delegations.list_unrevoked_by_delegatee(user_id)
        for delegation in await active_only(uow, pending, now):
            for permission in await uow.roles.get_permissions(delegation.role_id):
                grants.setdefault(permission, []).append(
                    Grant.delegated(delegation.role_id, delegation.id)
                )

        return EffectivePermissions(
            user_id=user_id,
            grants={p: tuple(g) for p, g in grants.items()},
        )
