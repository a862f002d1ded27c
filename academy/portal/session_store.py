import logging

from pydantic import BaseModel, ValidationError

from academy.portal.storage import LocalStorage
from academy.schemas.users import UserOut

logger = logging.getLogger(__name__)

SESSION_KEY = "academy_session"


class Session(BaseModel):
    user: UserOut
    access_token: str


class SessionStore:
    """The signed-in user, kept across restarts.

    ``load()`` must run before anything reads the current user; PortalState
    does this at the start of ``bootstrap()``.
    """

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def load(self) -> Session | None:
        raw = self.storage.get(SESSION_KEY)
        if raw is None:
            return None
        try:
            return Session.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding corrupt session entry")
            self.storage.remove(SESSION_KEY)
            return None

    def save(self, session: Session) -> None:
        self.storage.set(SESSION_KEY, session.model_dump(mode="json"))

    def clear(self) -> None:
        self.storage.remove(SESSION_KEY)
