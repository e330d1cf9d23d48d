"""
Session providers.

Authentication belongs to the host; the chat core only asks for the current
session and reads the user id from it.
"""

from typing import Protocol, runtime_checkable

from pydantic import BaseModel


class User(BaseModel):
    id: str
    name: str | None = None


class Session(BaseModel):
    user: User


@runtime_checkable
class SessionProvider(Protocol):
    async def auth(self) -> Session | None: ...


class StaticSessionProvider:
    """Always returns the same session; None means signed out."""

    def __init__(self, user_id: str | None = None, name: str | None = None):
        self.session = Session(user=User(id=user_id, name=name)) if user_id else None

    async def auth(self) -> Session | None:
        return self.session
