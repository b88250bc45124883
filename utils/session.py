"""Typed access to the per-user session"""

from abc import ABC, abstractmethod
from typing import Optional

from starlette.requests import Request

from oauth.models import SessionRecord

SESSION_KEY = "user"


class SessionStore(ABC):
    """Narrow read/write interface over the opaque session mechanism"""

    @abstractmethod
    def load(self) -> Optional[SessionRecord]:
        pass

    @abstractmethod
    def save(self, record: SessionRecord) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class CookieSessionStore(SessionStore):
    """Session record kept in the signed session cookie (SessionMiddleware)"""

    def __init__(self, request: Request):
        self._session = request.session

    def load(self) -> Optional[SessionRecord]:
        return SessionRecord.from_dict(self._session.get(SESSION_KEY))

    def save(self, record: SessionRecord) -> None:
        self._session[SESSION_KEY] = record.to_dict()

    def clear(self) -> None:
        self._session.clear()

