"""
User Directory

This service registers accounts and checks credentials.

Design Decisions:
- Emails are unique by exact, case-sensitive match (stored as submitted)
- Passwords are hashed with bcrypt (salted, one-way); the raw password is
  never stored
- bcrypt only reads the first 72 bytes of a password, so longer passwords
  are rejected instead of being silently truncated
"""

import threading
import uuid

import bcrypt

from tinyapp.core.exceptions import (
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from tinyapp.core.validators import is_blank
from tinyapp.models import User

BCRYPT_MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    # no stored hash can match a password register() would have refused
    if len(password.encode('utf-8')) > BCRYPT_MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))


class UserDirectory:
    """
    In-memory directory of registered users.
    
    Users are created once at registration and never changed or removed.
    """
    
    def __init__(self, bcrypt_rounds: int = 12):
        """
        Initialize an empty directory.
        
        Args:
            bcrypt_rounds: bcrypt cost factor for new password hashes
        """
        self.bcrypt_rounds = bcrypt_rounds
        self._users: dict[str, User] = {}
        self._ids_by_email: dict[str, str] = {}
        self._lock = threading.Lock()
    
    def __len__(self) -> int:
        return len(self._users)
    
    @staticmethod
    def _check_credentials(email: str, password: str) -> None:
        if is_blank(email):
            raise InvalidInputError("email")
        if is_blank(password):
            raise InvalidInputError("password")
    
    def register(self, email: str, password: str) -> User:
        """
        Create a new account.
        
        Args:
            email: Unique email address (exact match)
            password: Raw password, hashed before storage
        
        Returns:
            The new User
        
        Raises:
            InvalidInputError: If email or password is blank, or the password
                is longer than bcrypt accepts
            AlreadyExistsError: If the email is already registered
        """
        self._check_credentials(email, password)
        if len(password.encode('utf-8')) > BCRYPT_MAX_PASSWORD_BYTES:
            raise InvalidInputError("password", f"must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        
        password_hash = hash_password(password, self.bcrypt_rounds)
        
        with self._lock:
            if email in self._ids_by_email:
                raise AlreadyExistsError("User", email)
            user = User(id=uuid.uuid4().hex, email=email, password_hash=password_hash)
            self._users[user.id] = user
            self._ids_by_email[email] = user.id
            return user
    
    def authenticate(self, email: str, password: str) -> User:
        """
        Check an email and password pair.
        
        Returns:
            The matching User
        
        Raises:
            InvalidInputError: If email or password is blank
            NotFoundError: If no user has this email
            UnauthorizedError: If the password does not match
        """
        self._check_credentials(email, password)
        
        with self._lock:
            user_id = self._ids_by_email.get(email)
            if user_id is None:
                raise NotFoundError("User", email)
            user = self._users[user_id]
        
        if not verify_password(password, user.password_hash):
            raise UnauthorizedError(email)
        return user
    
    def get(self, user_id: str) -> User:
        """
        Look up a user by id.
        
        Raises:
            NotFoundError: If no user has this id
        """
        with self._lock:
            user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user
