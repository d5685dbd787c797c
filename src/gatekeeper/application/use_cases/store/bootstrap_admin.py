"""Grant the administrator role to initial users."""

import logging
from collections.abc import Iterable

from gatekeeper.application.use_cases.store.assign_user_role import AssignUserRoleUseCase
from gatekeeper.application.use_cases.store.register_user import RegisterUserUseCase
from gatekeeper.domain.exceptions import NotFound

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
BOOTSTRAP_ACTOR = "system:bootstrap"


class BootstrapAdminUseCase:
    """Register users and give them the seeded admin role.

    Users that already hold the role are skipped. Each new assignment is an
    ordinary audited ROLE_ASSIGNED by BOOTSTRAP_ACTOR.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        register_user: RegisterUserUseCase,
        assign_user_role: AssignUserRoleUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._register = register_user
        self._assign = assign_user_role

    async def execute(self, user_ids: Iterable[str], role_name: str = ADMIN_ROLE) -> list[str]:
        """Return the users that were granted the role by this call."""
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_name(role_name)
        if role is None:
            raise NotFound("Role", role_name)

        granted = []
        for user_id in user_ids:
            user = await self._register.execute(user_id)
            async with self._uow_factory() as uow:
                held = await uow.user_roles.get(user.id, role.id)
            if held:
                logger.info("User %s already holds role %s", user.id, role_name)
                continue
            await self._assign.execute(BOOTSTRAP_ACTOR, user.id, role.id)
            granted.append(user.id)
        return granted
