"""Registration, login and status operations."""

from __future__ import annotations

import logging

from email_validator import EmailNotValidError, validate_email

from postfeed.adapters.passwords import BCRYPT_MAX_PASSWORD_BYTES, PasswordHasher
from postfeed.core.logging_safety import safe_log_email, safe_log_identifier
from postfeed.domain.credentials import CredentialService
from postfeed.domain.guard import require_authenticated
from postfeed.errors import ApiError, not_found_error, validation_error
from postfeed.repositories.memory import DuplicateEmailError, InMemoryStore, PrincipalRecord
from postfeed.schemas.auth import AuthData, RequestContext
from postfeed.schemas.principal import Principal

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 5
_LOGIN_FAILURE_MESSAGE = "Email or password is incorrect."


class AccountService:
    def __init__(
        self,
        store: InMemoryStore,
        credentials: CredentialService,
        hasher: PasswordHasher,
    ) -> None:
        self._store = store
        self._credentials = credentials
        self._hasher = hasher

    def register(self, *, email: str, name: str, password: str) -> Principal:
        errors = _registration_errors(email=email, password=password)
        if errors:
            raise validation_error(errors)

        email = normalize_email(email)
        if self._store.find_principal_by_email(email) is not None:
            raise _email_taken(email)

        try:
            record = self._store.create_principal(
                email=email,
                name=name,
                password_hash=self._hasher.hash(password),
            )
        except DuplicateEmailError:
            # Another registration for the same address won the insert.
            raise _email_taken(email) from None
        logger.info(
            "account.registered principal_id=%s email=%s",
            safe_log_identifier(record.id, prefix="pid"),
            safe_log_email(email),
        )
        return to_principal(record)

    def login(self, *, email: str, password: str) -> AuthData:
        try:
            email = normalize_email(email)
        except EmailNotValidError:
            # Malformed addresses never match a registered principal.
            record = None
        else:
            record = self._store.find_principal_by_email(email)
        if record is None:
            self._hasher.compare_decoy(password)
            logger.warning("auth.login_rejected email=%s reason=unknown_email", safe_log_email(email))
            raise _login_failure()

        if not self._hasher.compare(password, record.password_hash):
            logger.warning(
                "auth.login_rejected principal_id=%s reason=password_mismatch",
                safe_log_identifier(record.id, prefix="pid"),
            )
            raise _login_failure()

        token = self._credentials.issue(email=record.email, principal_id=record.id)
        logger.info("auth.login_accepted principal_id=%s", safe_log_identifier(record.id, prefix="pid"))
        return AuthData(token=token, user_id=record.id)

    def get_status(self, context: RequestContext) -> Principal:
        return to_principal(self._load_caller(context))

    def set_status(self, context: RequestContext, *, status: str) -> Principal:
        record = self._load_caller(context)
        record.status = status
        saved = self._store.save_principal(record)
        logger.info("account.status_updated principal_id=%s", safe_log_identifier(saved.id, prefix="pid"))
        return to_principal(saved)

    def _load_caller(self, context: RequestContext) -> PrincipalRecord:
        # Only the caller's own principal is ever addressable here.
        principal = require_authenticated(context, message="Not authorized.")
        record = self._store.get_principal(principal.principal_id)
        if record is None:
            raise not_found_error("User not found!")
        return record


def to_principal(record: PrincipalRecord) -> Principal:
    return Principal(
        id=record.id,
        email=record.email,
        name=record.name,
        status=record.status,
        posts=list(record.post_ids),
    )


def normalize_email(email: str) -> str:
    """Return the canonical form of ``email``, compared case-insensitively.

    Raises ``EmailNotValidError`` for malformed addresses.
    """
    return validate_email(email, check_deliverability=False).normalized.lower()


def _registration_errors(*, email: str, password: str) -> list[str]:
    errors: list[str] = []
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        errors.append("Email is invalid")

    if not password or len(password) < MIN_PASSWORD_LENGTH:
        errors.append("Password too short!")
    elif len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        errors.append("Password too long!")
    return errors


def _email_taken(email: str) -> ApiError:
    logger.info("account.register_rejected email=%s reason=email_taken", safe_log_email(email))
    return ApiError(status_code=409, code="EMAIL_ALREADY_REGISTERED", message="User already exists")


def _login_failure() -> ApiError:
    return ApiError(status_code=401, code="UNAUTHENTICATED", message=_LOGIN_FAILURE_MESSAGE)


__all__ = ["AccountService", "MIN_PASSWORD_LENGTH", "normalize_email", "to_principal"]
