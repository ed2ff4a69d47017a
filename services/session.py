import json
import logging
import re
import threading
import time
from typing import Dict, Iterable, Optional

from pydantic import ValidationError as ModelValidationError

from auth import hash_password, verify_password
from config import ADMIN_EMAILS, BUILTIN_ACCOUNTS, INSTITUTIONAL_DOMAIN, LOGIN_DELAY_SECONDS
from errors import AccountAlreadyExists, AccountNotFound, IncorrectPassword, InvalidEmailDomain, ValidationError
from schemas.auth import CredentialRecord, User
from storage import KeyValueStore, StoredEntry

logger = logging.getLogger(__name__)

SESSION_KEY = "user"
SESSIONS_KEY = "sessions"
CREDENTIAL_KEY_PREFIX = "user_"


def credential_key(email: str) -> str:
    return f"{CREDENTIAL_KEY_PREFIX}{email}"


class SessionService:
    """Owns the authenticated identities and the registered accounts.

    Every login or signup opens a session that stays active until that user
    logs out. ``current_user`` is the most recently opened session of this
    process and is mirrored under the ``user`` key.
    """

    def __init__(
        self,
        store: KeyValueStore,
        domain: str = INSTITUTIONAL_DOMAIN,
        admin_emails: Iterable[str] = ADMIN_EMAILS,
        builtin_accounts: Optional[Dict[str, dict]] = None,
        login_delay: float = LOGIN_DELAY_SECONDS,
    ):
        self.store = store
        self.domain = domain
        self.admin_emails = {email.lower() for email in admin_emails}
        self.login_delay = login_delay
        self.current_user: Optional[User] = None
        self._email_pattern = re.compile(rf"^[a-zA-Z0-9._%+-]+@{re.escape(domain)}$")
        self._lock = threading.RLock()
        self._sessions: Dict[str, User] = {}
        self._sessions_revision = 0
        self._seed_builtin_accounts(BUILTIN_ACCOUNTS if builtin_accounts is None else builtin_accounts)
        self._restore_session()

    def validate_email(self, email: str) -> bool:
        return bool(self._email_pattern.match(email))

    def login(self, email: str, password: str) -> User:
        email = self._normalize(email)
        if not self.validate_email(email):
            raise InvalidEmailDomain(self.domain)
        record = self._get_credentials(email)
        if record is None:
            raise AccountNotFound()
        self._simulate_latency()
        if not verify_password(password, record.password):
            raise IncorrectPassword()
        user = self._start_session(email, record.name or email.split("@")[0])
        logger.info("User %s logged in", email)
        return user

    def signup(self, email: str, name: Optional[str], password: str) -> User:
        email = self._normalize(email)
        if not self.validate_email(email):
            raise InvalidEmailDomain(self.domain)
        if not password:
            raise ValidationError("Please enter a password")
        if self.store.get_entry(credential_key(email)) is not None:
            raise AccountAlreadyExists()
        self._simulate_latency()
        name = (name or "").strip() or email.split("@")[0]
        record = CredentialRecord(name=name, password=hash_password(password))
        self.store.set_item(credential_key(email), record.model_dump(), expected_revision=0)
        user = self._start_session(email, name)
        logger.info("Registered new account %s", email)
        return user

    def logout(self, actor: Optional[User] = None) -> None:
        """End ``actor``'s session, or the current one when no actor is given.

        Other users' sessions are left alone. Idempotent.
        """
        with self._lock:
            target = actor or self.current_user
            if target is not None:
                active = self._active_sessions()
                if target.id in active:
                    self._save_sessions({sid: user for sid, user in active.items() if sid != target.id})
                    logger.info("User %s logged out", target.email)
            if target is None or (self.current_user is not None and self.current_user.id == target.id):
                self.store.remove_item(SESSION_KEY)
                self.current_user = None

    def get_session(self, session_id: str) -> Optional[User]:
        """The user of an active session, or None once it has ended."""
        with self._lock:
            return self._active_sessions().get(session_id)

    def is_admin_email(self, email: str) -> bool:
        return email.lower() in self.admin_emails

    def _normalize(self, email: str) -> str:
        return (email or "").strip().lower()

    def _simulate_latency(self):
        if self.login_delay > 0:
            time.sleep(self.login_delay)

    def _get_credentials(self, email: str) -> Optional[CredentialRecord]:
        try:
            data = self.store.get_item(credential_key(email))
            return CredentialRecord.model_validate(data) if data is not None else None
        except (json.JSONDecodeError, ModelValidationError):
            logger.warning("Credential record for %s is malformed", email)
            return None

    def _start_session(self, email: str, name: str) -> User:
        with self._lock:
            active = self._active_sessions()
            stamp = int(time.time() * 1000)
            while f"user_{stamp}" in active:
                stamp += 1
            user = User(
                id=f"user_{stamp}",
                email=email,
                name=name,
                is_admin=self.is_admin_email(email),
            )
            self._save_sessions({**active, user.id: user})
            self.store.set_item(SESSION_KEY, user.to_record())
            self.current_user = user
            return user

    # TODO: prune sessions whose bearer tokens are past ACCESS_TOKEN_EXPIRE_MINUTES.
    def _active_sessions(self) -> Dict[str, User]:
        # Re-read only when another writer has moved the revision on.
        if self.store.revision(SESSIONS_KEY) != self._sessions_revision:
            entry = self.store.get_entry(SESSIONS_KEY)
            self._sessions_revision = entry.revision if entry else 0
            self._sessions = self._parse_sessions(entry)
        return self._sessions

    def _parse_sessions(self, entry: Optional[StoredEntry]) -> Dict[str, User]:
        if entry is None:
            return {}
        try:
            return {sid: User.model_validate(record) for sid, record in json.loads(entry.value).items()}
        except (json.JSONDecodeError, AttributeError, ModelValidationError) as exc:
            logger.warning("Discarding malformed session registry: %s", exc)
            return {}

    def _save_sessions(self, sessions: Dict[str, User]):
        payload = {sid: user.to_record() for sid, user in sessions.items()}
        self._sessions_revision = self.store.set_item(SESSIONS_KEY, payload, expected_revision=self._sessions_revision)
        self._sessions = sessions

    def _restore_session(self):
        try:
            data = self.store.get_item(SESSION_KEY)
            if data is not None:
                self.current_user = User.model_validate(data)
        except (json.JSONDecodeError, ModelValidationError) as exc:
            logger.warning("Discarding malformed session record: %s", exc)
            self.store.remove_item(SESSION_KEY)
            self.current_user = None

    def _seed_builtin_accounts(self, accounts: Dict[str, dict]):
        for email, account in accounts.items():
            email = self._normalize(email)
            if self.store.get_entry(credential_key(email)) is None:
                record = CredentialRecord(name=account["name"], password=hash_password(account["password"]))
                self.store.set_item(credential_key(email), record.model_dump())
