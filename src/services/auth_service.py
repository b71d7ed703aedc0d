"""Phone-number login and registration."""

import logging
from typing import TYPE_CHECKING

from src.core.config import constants
from src.core.logging import span
from src.domain.member import Member
from src.domain.rows import generate_id
from src.services.google_service import disconnect_google
from src.services.sync_service import SyncResult


if TYPE_CHECKING:
    from src.core.app_context import AppContext


logger = logging.getLogger(__name__)


def avatar_for(phone: str) -> str:
    return constants.AVATAR_URL_TEMPLATE.format(seed=phone)


async def login(context: "AppContext", phone: str, name: str = "") -> tuple[Member, SyncResult | None]:
    """Log in by phone number, registering the member on first use.

    The admin phone registers a Head Gardener (a blank name falls back to the
    role). Any other unknown phone needs a name and registers a Gardener.

    Args:
        context: Application context
        phone: Login phone number
        name: Display name, used only when registering

    Returns:
        Tuple of (logged in member, sync result of the registration or None
        when the member already existed)

    Raises:
        ValueError: If the phone is blank, or a name is missing for a new gardener
    """
    with span("auth_service.login"):
        phone = phone.strip()
        name = name.strip()

        # Guard: Phone is the login key
        if not phone:
            msg = "Phone number is required"
            raise ValueError(msg)

        existing = context.board.get_member_by_phone(phone)
        result: SyncResult | None = None

        if existing is not None:
            member = existing
            logger.info("Member %s logged in", member.id)
        else:
            is_admin = phone == context.settings.admin_phone
            if is_admin:
                role = constants.ROLE_HEAD_GARDENER
                name = name or constants.ROLE_HEAD_GARDENER
            else:
                if not name:
                    msg = "Name is required to register"
                    logger.warning("Registration without a name for %s", phone)
                    raise ValueError(msg)
                role = constants.ROLE_GARDENER

            member = Member(
                id=generate_id(),
                name=name,
                role=role,
                phone_number=phone,
                is_admin=is_admin,
                avatar=avatar_for(phone),
            )
            result = await context.board.add_member(member)
            logger.info("Registered %s %s (%s)", role, member.name, member.id)

        context.current_user = member
        context.session_store.save(member)
        return member, result


async def logout(context: "AppContext") -> None:
    """Forget the current member and sign out of Google."""
    with span("auth_service.logout"):
        user = context.current_user
        context.current_user = None
        context.session_store.clear()
        context.speech.stop()
        await disconnect_google(context)
        if user is not None:
            logger.info("Member %s logged out", user.id)
