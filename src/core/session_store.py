"""Local session storage holding the logged-in member across restarts."""

import logging
from pathlib import Path

from pydantic import ValidationError

from src.domain.member import Member


logger = logging.getLogger(__name__)


class SessionStore:
    """Single persisted key with the serialized current member."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Member | None:
        """Return the persisted member, or None when absent or unreadable."""
        if not self._path.exists():
            return None
        try:
            return Member.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.error("Failed to parse user from session storage", extra={"path": str(self._path), "error": str(e)})
            return None

    def save(self, member: Member) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(member.model_dump_json(by_alias=True), encoding="utf-8")
        logger.info("Persisted session user", extra={"member_id": member.id})

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
        logger.info("Cleared session storage")
