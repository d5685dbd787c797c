"""Authorization of API calls through the decision engine itself."""

import falcon.asgi

from gatekeeper.application.use_cases.access.evaluate_access import EvaluateAccessUseCase


class AccessGuard:
    """Checks that the calling user may perform (resource_type, action).

    Every check is an ordinary Evaluate call, so it is audited.
    """

    def __init__(self, evaluate_access: EvaluateAccessUseCase) -> None:
        self._evaluate = evaluate_access

    async def allows(
        self,
        req: falcon.asgi.Request,
        resource_type: str,
        action: str,
        resource_id: str | None = None,
    ) -> bool:
        user = getattr(req.context, "user", None)
        if not user:
            return False
        decision = await self._evaluate.execute(
            user.user_id,
            resource_type,
            action,
            resource_id=resource_id,
            context=getattr(req.context, "audit", None),
        )
        return decision.allowed
