"""
Role and ownership policy.

Every route asks ``authorize(actor, action, resource)`` instead of
checking roles inline. Rules are plain predicates keyed by action name.
"""
import logging
from typing import Any, Callable, Dict

from app.models.application import Application
from app.models.notification import Notification
from app.models.task import Task
from app.models.user import User, UserRole
from app.utils.exceptions import ForbiddenError

logger = logging.getLogger(__name__)


def _is_admin(actor: User) -> bool:
    return actor.role == UserRole.ADMIN


def _owns_task(actor: User, task: Task) -> bool:
    return task is not None and task.employer_id == actor.id


def _is_participant(actor: User, application: Application) -> bool:
    """Student who applied or employer who posted the task"""
    if application is None:
        return False
    if application.student_id == actor.id:
        return True
    return application.task is not None and application.task.employer_id == actor.id


Rule = Callable[[User, Any], bool]

RULES: Dict[str, Rule] = {
    # Profiles
    "user:read": lambda actor, user: _is_admin(actor) or actor.id == user.id,
    "user:update": lambda actor, user: _is_admin(actor) or actor.id == user.id,

    # Tasks
    "task:create": lambda actor, _: actor.role in (UserRole.EMPLOYER, UserRole.ADMIN),
    "task:update": lambda actor, task: _is_admin(actor) or _owns_task(actor, task),
    "task:view_applications": lambda actor, task: _is_admin(actor) or _owns_task(actor, task),

    # Applications
    "application:create": lambda actor, _: actor.role == UserRole.STUDENT,
    "application:list_own": lambda actor, _: actor.role == UserRole.STUDENT,
    "application:read": lambda actor, app: _is_admin(actor) or _is_participant(actor, app),
    "application:decide": lambda actor, task: _is_admin(actor) or _owns_task(actor, task),

    # Chat; admins may read any conversation but only participants write
    "message:read": lambda actor, app: _is_admin(actor) or _is_participant(actor, app),
    "message:send": lambda actor, app: _is_participant(actor, app),
    "message:mark_read": lambda actor, message: message.receiver_id == actor.id,

    # Payments
    "payment:record": lambda actor, task: _is_admin(actor) or _owns_task(actor, task),
    "payment:start": lambda actor, task: _is_admin(actor) or _owns_task(actor, task),
    "payment:view": lambda actor, app: _is_admin(actor) or _is_participant(actor, app),

    # Moderation
    "badge:manage": lambda actor, _: _is_admin(actor),
    "report:moderate": lambda actor, _: _is_admin(actor),

    "notification:update": lambda actor, n: isinstance(n, Notification) and n.user_id == actor.id,
}


def can(actor: User, action: str, resource: Any = None) -> bool:
    rule = RULES.get(action)
    if rule is None:
        # Unknown actions are denied
        logger.warning("No authorization rule for action %s", action)
        return False
    return bool(rule(actor, resource))


def authorize(actor: User, action: str, resource: Any = None) -> None:
    """Raise ForbiddenError unless ``actor`` may perform ``action`` on ``resource``"""
    if not can(actor, action, resource):
        logger.info("Denied %s for user %s (role=%s)", action, actor.id, actor.role.value)
        raise ForbiddenError()
