"""
Registered accounts.

Accounts live either in a remote Supabase table (``users``) or, when no
remote table is configured, in the local sqlite ``accounts`` table. Only the
username and a bcrypt hash are stored.
"""

import logging
import sqlite3
from datetime import datetime
from typing import Optional, Protocol

import bcrypt
import requests

from .database import get_db
from .errors import AuthMismatch, DuplicateError, InvalidCredentials, MissingCredentials, NetworkDegraded
from .utils.http import http_session

logger = logging.getLogger(__name__)

MAX_PASSWORD_BYTES = 72


class AccountStore(Protocol):
    def find_by_username(self, username: str) -> Optional[dict]: ...

    def insert(self, username: str, password_hash: str) -> None: ...


class SqliteAccountStore:
    def __init__(self, database=None):
        self.database = database

    def find_by_username(self, username: str) -> Optional[dict]:
        with get_db(self.database) as conn:
            conn.row_factory = sqlite3.Row
            row = conn.execute(
                "SELECT username, password_hash, created_at FROM accounts WHERE username = ?",
                (username,),
            ).fetchone()
        return dict(row) if row else None

    def insert(self, username: str, password_hash: str) -> None:
        try:
            with get_db(self.database) as conn:
                conn.execute(
                    "INSERT INTO accounts (username, password_hash, created_at) VALUES (?, ?, ?)",
                    (username, password_hash, datetime.utcnow().isoformat()),
                )
                conn.commit()
        except sqlite3.IntegrityError as e:
            raise DuplicateError(f"Username already exists: {username}") from e


class SupabaseAccountStore:
    """PostgREST access to the remote ``users`` table."""

    def __init__(self, url: str, api_key: str, table: str = "users", session=None):
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self.api_key = api_key
        self.session = session or http_session

    def _headers(self, **extra):
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }
        headers.update(extra)
        return headers

    def find_by_username(self, username: str) -> Optional[dict]:
        try:
            res = self.session.get(
                self.endpoint,
                params={"username": f"eq.{username}", "select": "*"},
                headers=self._headers(),
                timeout=5,
            )
            res.raise_for_status()
            rows = res.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Account lookup failed: {e}")
            raise NetworkDegraded("Account service unavailable") from e
        return rows[0] if rows else None

    def insert(self, username: str, password_hash: str) -> None:
        try:
            res = self.session.post(
                self.endpoint,
                json=[{"username": username, "password_hash": password_hash}],
                headers=self._headers(Prefer="return=minimal"),
                timeout=5,
            )
        except requests.RequestException as e:
            logger.error(f"Account insert failed: {e}")
            raise NetworkDegraded("Account service unavailable") from e

        if res.status_code == 409:
            raise DuplicateError(f"Username already exists: {username}")
        if not res.ok:
            logger.error(f"Account insert failed ({res.status_code}): {res.text}")
            raise NetworkDegraded("Account service unavailable")


def account_store_from_config(config):
    url = config.get("SUPABASE_URL")
    key = config.get("SUPABASE_ANON_KEY")
    if url and key:
        return SupabaseAccountStore(url, key)
    return SqliteAccountStore(config.get("DATABASE"))


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


def _clean(username, password):
    username = username or ""
    password = password or ""
    if not isinstance(username, str) or not isinstance(password, str):
        raise InvalidCredentials("Username and password must be text.")
    username = username.strip()
    if not username or not password:
        raise MissingCredentials("Please enter both username and password.")
    # bcrypt only looks at the first 72 bytes and newer releases reject longer input
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise InvalidCredentials(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    return username, password


def register(store: AccountStore, username, password) -> str:
    username, password = _clean(username, password)
    if store.find_by_username(username):
        raise DuplicateError(f"Username already exists: {username}")
    store.insert(username, hash_password(password))
    logger.info(f"Registered account {username}")
    return username


def authenticate(store: AccountStore, username, password) -> str:
    username, password = _clean(username, password)
    row = store.find_by_username(username)
    if not row or not verify_password(password, row.get("password_hash", "")):
        raise AuthMismatch("Username/password does not exist.")
    return username
