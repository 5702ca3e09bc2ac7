"""
LDAP connection pool.

Keeps a small number of admin-bound ldap3 connections alive and hands them
out one request at a time. Connections that fail at the transport level
are discarded instead of being returned.

Dependencies: ldap3, user_portal.configs
System role: Directory connection lifecycle management
"""

import logging
import queue
import threading
from contextlib import contextmanager
from typing import Iterator
from urllib.parse import urlparse

from ldap3 import NONE, Connection, Server
from ldap3.core.exceptions import LDAPException

from user_portal.configs.ldap import LDAPSettings
from user_portal.core.exceptions import DirectoryError

logger = logging.getLogger(__name__)


def build_server(settings: LDAPSettings) -> Server:
    """Create an ldap3 Server from an ``ldap://`` or ``ldaps://`` URL."""
    parsed = urlparse(settings.url)
    use_ssl = parsed.scheme == "ldaps"
    port = parsed.port or (636 if use_ssl else 389)
    return Server(
        parsed.hostname or settings.url,
        port=port,
        use_ssl=use_ssl,
        connect_timeout=settings.connect_timeout,
        get_info=NONE,
    )


class LDAPConnectionPool:
    """Bounded pool of bound ldap3 connections."""

    def __init__(self, settings: LDAPSettings, server: Server | None = None) -> None:
        self._settings = settings
        self._server = server or build_server(settings)
        self._idle: queue.LifoQueue[Connection] = queue.LifoQueue()
        self._created = 0
        self._lock = threading.Lock()

    @property
    def server(self) -> Server:
        return self._server

    def new_connection(self, user: str, password: str) -> Connection:
        """Open a connection without binding it."""
        return Connection(
            self._server,
            user=user,
            password=password,
            auto_bind=False,
            receive_timeout=self._settings.receive_timeout,
            raise_exceptions=False,
        )

    def _open_admin(self) -> Connection:
        conn = self.new_connection(self._settings.admin_dn, self._settings.admin_password)
        if not conn.bind():
            result = conn.result or {}
            conn.unbind()
            raise DirectoryError(
                f"Administrative bind failed: {result.get('description', 'unknown')}",
                result_code=result.get("result"),
                transient=result.get("result") in (51, 52, 80),
            )
        logger.debug("Opened pooled LDAP connection", extra={"server": self._settings.url})
        return conn

    def _take(self) -> Connection:
        try:
            conn = self._idle.get_nowait()
            if not conn.closed:
                return conn
            with self._lock:
                self._created -= 1
        except queue.Empty:
            pass

        with self._lock:
            can_create = self._created < self._settings.pool_size
            if can_create:
                self._created += 1
        if can_create:
            try:
                return self._open_admin()
            except Exception:
                with self._lock:
                    self._created -= 1
                raise

        try:
            return self._idle.get(timeout=self._settings.receive_timeout)
        except queue.Empty:
            raise DirectoryError("LDAP connection pool exhausted", transient=True)

    def _discard(self, conn: Connection) -> None:
        with self._lock:
            self._created -= 1
        try:
            conn.unbind()
        except LDAPException:
            logger.debug("Ignoring unbind failure on discarded connection")

    @contextmanager
    def acquire(self) -> Iterator[Connection]:
        """Borrow a bound admin connection for the duration of the block."""
        conn = self._take()
        try:
            yield conn
        except DirectoryError as e:
            if e.transient:
                self._discard(conn)
            else:
                self._idle.put(conn)
            raise
        except LDAPException:
            self._discard(conn)
            raise
        except Exception:
            self._idle.put(conn)
            raise
        else:
            self._idle.put(conn)

    def close_all(self) -> None:
        while True:
            try:
                conn = self._idle.get_nowait()
            except queue.Empty:
                break
            self._discard(conn)
        logger.info("LDAP connection pool closed")
