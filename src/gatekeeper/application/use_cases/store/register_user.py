"""Register user use case."""

import logging

from gatekeeper.application.ports import Clock
from gatekeeper.domain.entities import User
from gatekeeper.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_USER_ID_LENGTH = 255


class RegisterUserUseCase:
    """Record an authenticated subject so it can hold roles and receive delegations.

    Idempotent; a known user only has email and display name refreshed.
    """

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def execute(
        self,
        user_id: str,
        email: str | None = None,
        display_name: str | None = None,
    ) -> User:
        user_id = (user_id or "").strip()
        if not user_id or len(user_id) > MAX_USER_ID_LENGTH:
            raise ValidationError(f"Invalid user id: {user_id!r}")
        async with self._uow_factory() as uow:
            user = await uow.users.upsert(
                User(
                    id=user_id,
                    email=email,
                    display_name=display_name,
                    created_at=self._clock.now(),
                )
            )
        logger.debug("Registered user %s", user_id)
        return user
