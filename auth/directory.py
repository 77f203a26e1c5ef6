"""
auth/directory.py -- Registration and login.

UserDirectory ties the credential hasher, the token service and the user store
together. It owns two rules:

  Email uniqueness: a pre-check (get_by_email) gives the fast, common answer;
      the unique index on users.email is the backstop for concurrent
      registrations that both pass the pre-check. Both paths raise the same
      BadRequestError("Email already in use").

  Login indistinguishability: unknown email, wrong password and a corrupt
      stored hash all raise the same AuthenticationError. Unknown emails still
      run one bcrypt check against DUMMY_HASH so timing does not leak which
      case occurred.

Neither the plaintext password nor the issued token is ever logged.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.passwords import DUMMY_HASH, HashingError, hash_password, verify_password
from auth.store import UserStore
from auth.tokens import TokenService
from core.errors import AuthenticationError, BadRequestError, StorageError

logger = logging.getLogger("postgate.auth")

_EMAIL_IN_USE = "Email already in use"
_BAD_CREDENTIALS = "Invalid email or password"


class UserDirectory:
    def __init__(self, store: UserStore, tokens: TokenService) -> None:
        self._store = store
        self._tokens = tokens

    def register(self, username: str, email: str, password: str, phonenumber: str) -> User:
        """Create a user account and return it with its assigned id.

        Raises BadRequestError if the email is taken (by pre-check or by the
        unique index) or the password cannot be hashed.
        """
        if self._store.get_by_email(email) is not None:
            raise BadRequestError(_EMAIL_IN_USE)

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            phonenumber=phonenumber,
        )
        try:
            user_id = self._store.create_user(user)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same email.
            logger.info("Registration rejected by unique email index")
            raise BadRequestError(_EMAIL_IN_USE) from exc

        created = self._store.get_by_id(user_id)
        if created is None:
            raise StorageError("User not found after write")
        logger.info("Registered user %s (%s)", created.username, created.id)
        return created

    def login(self, email: str, password: str) -> str:
        """Return a fresh token for the account, or raise AuthenticationError."""
        user = self._store.get_by_email(email)
        if user is None:
            # Equalize timing -- do NOT return before running bcrypt.
            _password_matches(password, DUMMY_HASH)
            logger.info("Login failed: unknown email")
            raise AuthenticationError(_BAD_CREDENTIALS)

        if not _password_matches(password, user.password_hash):
            logger.info("Login failed for user %s", user.id)
            raise AuthenticationError(_BAD_CREDENTIALS)

        logger.info("Login: %s (%s)", user.username, user.id)
        return self._tokens.issue(user.id)


def _password_matches(password: str, password_hash: str) -> bool:
    """verify_password() with a bcrypt failure counted as a mismatch."""
    try:
        return verify_password(password, password_hash)
    except HashingError:
        logger.warning("Password check failed inside bcrypt; treating as a mismatch")
        return False
