"""
Session Helpers and Dependencies

The signed session cookie carries three keys:
- user_id: set on login/registration, removed on logout
- visitor_id: anonymous id handed out on the first visit to a short URL
- flash: messages to show on the next rendered page

The caller identity is resolved here and passed explicitly to the stores.
"""

import uuid
from typing import Optional

from fastapi import Depends, Request

from tinyapp.core.exceptions import LoginRequiredError, NotFoundError
from tinyapp.models import User
from tinyapp.services.link_store import LinkStore
from tinyapp.services.user_directory import UserDirectory

SESSION_USER_KEY = "user_id"
SESSION_VISITOR_KEY = "visitor_id"
SESSION_FLASH_KEY = "flash"


def get_link_store(request: Request) -> LinkStore:
    return request.app.state.link_store


def get_user_directory(request: Request) -> UserDirectory:
    return request.app.state.user_directory


def get_current_user(
    request: Request,
    users: UserDirectory = Depends(get_user_directory),
) -> Optional[User]:
    """
    Resolve the logged-in user from the session.
    
    A session can outlive the user it names (the directory is rebuilt on
    every restart); such sessions are logged out.
    """
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None
    try:
        return users.get(user_id)
    except NotFoundError:
        request.session.pop(SESSION_USER_KEY, None)
        return None


def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise LoginRequiredError()
    return user


def get_visitor_id(request: Request, user: Optional[User] = Depends(get_current_user)) -> str:
    """Return the user id, or a stable anonymous id stored in the session."""
    if user is not None:
        return user.id
    visitor_id = request.session.get(SESSION_VISITOR_KEY)
    if visitor_id is None:
        visitor_id = f"anon-{uuid.uuid4().hex}"
        request.session[SESSION_VISITOR_KEY] = visitor_id
    return visitor_id


def log_in(request: Request, user: User) -> None:
    request.session[SESSION_USER_KEY] = user.id


def log_out(request: Request) -> None:
    request.session.pop(SESSION_USER_KEY, None)


def flash(request: Request, message: str) -> None:
    request.session.setdefault(SESSION_FLASH_KEY, []).append(message)


def pop_flashes(request: Request) -> list[str]:
    return request.session.pop(SESSION_FLASH_KEY, [])
