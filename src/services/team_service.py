"""Admin-managed team roster."""

import logging
from typing import TYPE_CHECKING

from src.core.config import constants
from src.core.logging import span
from src.domain.member import Member
from src.domain.rows import generate_id
from src.services.auth_service import avatar_for
from src.services.sync_service import SyncResult


if TYPE_CHECKING:
    from src.core.app_context import AppContext


logger = logging.getLogger(__name__)


def _require_admin(context: "AppContext") -> Member:
    user = context.require_user()
    if not user.is_admin:
        msg = "Only an admin can manage the team"
        logger.warning("%s (user %s)", msg, user.id)
        raise PermissionError(msg)
    return user


async def add_member(
    context: "AppContext",
    *,
    name: str,
    phone: str,
    role: str = constants.ROLE_GARDENER,
) -> tuple[Member, SyncResult]:
    """Add a non-admin member to the roster.

    Args:
        context: Application context
        name: Display name
        phone: Login phone number, must not already be in use
        role: Free-text job title

    Returns:
        Tuple of (new member, sync result)

    Raises:
        PermissionError: If the current user is not an admin
        ValueError: If the phone is blank or already taken, or the name is invalid
    """
    with span("team_service.add_member"):
        _require_admin(context)
        phone = phone.strip()

        # Guard: Phone numbers are unique login keys
        if phone and context.board.get_member_by_phone(phone) is not None:
            msg = f"Phone number {phone} is already registered"
            logger.warning(msg)
            raise ValueError(msg)

        member = Member(
            id=generate_id(),
            name=name,
            role=role.strip() or constants.ROLE_GARDENER,
            phone_number=phone,
            is_admin=False,
            avatar=avatar_for(phone),
        )
        result = await context.board.add_member(member)
        logger.info("Added member %s (%s)", member.name, member.id)
        return member, result


async def remove_member(context: "AppContext", member_id: str) -> SyncResult:
    """Remove a member. Tasks assigned to them keep the stale assignee id.

    Raises:
        PermissionError: If the current user is not an admin
        ValueError: If an admin tries to remove themselves
        KeyError: If the member does not exist
    """
    with span("team_service.remove_member"):
        admin = _require_admin(context)
        if member_id == admin.id:
            msg = "You cannot remove yourself"
            raise ValueError(msg)

        result = await context.board.remove_member(member_id)
        logger.info("Removed member %s", member_id)
        return result
