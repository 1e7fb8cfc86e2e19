# core/session_mirror.py

"""
Cross-surface session mirror.

Lets the hub and every module surface agree on which school is currently
selected without a shared backend session. The mirror is a best-effort
UX convenience: storage failures are logged and swallowed, and a failed
or expired read looks exactly like first-time use.

State per namespace:  Empty -> Published -> (Expired | Cleared) -> Empty
A fresh publish simply overwrites the previous entry (last writer wins).
"""

import json
import time
from typing import Callable, Optional

from core.local_store import LocalStore
from core.logging_config import logger
from models.access import SyncedSelection


STORAGE_KEY = "schooltools_shared_state"
AUTH_REDIRECT_KEY = "auth_redirect_after_login"
SYNC_TYPE = "school_sync"
DEFAULT_TTL_SECONDS = 30 * 60


class SessionMirror:
    """
    Args:
        durable: store visible to every tab of this user (new tabs read it)
        scoped: store visible to one tab / surface session only
        ttl_seconds: how long a published selection stays readable
        clock: returns the current time in epoch seconds
        namespace: isolates users sharing the same stores (usually the user id)
        scope: identifies the tab / surface session within the namespace
        source: surface that publishes (recorded for debugging only)
    """

    def __init__(
        self,
        durable: LocalStore,
        scoped: LocalStore,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        namespace: str = "default",
        scope: Optional[str] = None,
        source: str = "app",
    ):
        self.durable = durable
        self.scoped = scoped
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.namespace = namespace
        self.scope = scope or "default"
        self.source = source

    # -----------------------------------------------------
    # Keys
    # -----------------------------------------------------
    @property
    def durable_key(self) -> str:
        return f"{STORAGE_KEY}:{self.namespace}"

    @property
    def scoped_key(self) -> str:
        return f"{STORAGE_KEY}:{self.namespace}:{self.scope}"

    @property
    def return_to_key(self) -> str:
        return f"{AUTH_REDIRECT_KEY}:{self.namespace}"

    # -----------------------------------------------------
    # Selection
    # -----------------------------------------------------
    def publish(self, selection: SyncedSelection) -> Optional[SyncedSelection]:
        """
        Stamp the selection with the current time and write it to both stores.
        Returns the stamped selection, or None if nothing could be written.
        """
        stamped = SyncedSelection(
            organization_id=selection.organization_id,
            created_at=self.clock(),
        )
        payload = json.dumps({
            "type": SYNC_TYPE,
            "organization_id": stamped.organization_id,
            "created_at": stamped.created_at,
            "source": self.source,
        })

        written = 0
        for store, key in ((self.durable, self.durable_key), (self.scoped, self.scoped_key)):
            try:
                store.set(key, payload, ttl_seconds=self.ttl_seconds)
                written += 1
            except Exception as e:
                logger.error(f"Failed to store shared school selection ({key}): {e}")

        if not written:
            return None

        logger.info(f"Synced school {stamped.organization_id} from surface '{self.source}'")
        return stamped

    def read(self) -> Optional[SyncedSelection]:
        raw = self._read_raw()
        if raw is None:
            return None

        try:
            data = json.loads(raw)
            if data.get("type") != SYNC_TYPE or not data.get("organization_id"):
                logger.info("No synced school data found or invalid type")
                self.clear()
                return None
            selection = SyncedSelection(
                organization_id=str(data["organization_id"]),
                created_at=float(data["created_at"]),
            )
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.warning(f"Discarding unreadable shared school selection: {e}")
            self.clear()
            return None

        if self.clock() - selection.created_at > self.ttl_seconds:
            logger.info(f"Shared school selection {selection.organization_id} expired")
            self.clear()
            return None

        return selection

    def clear(self) -> None:
        for store, key in ((self.durable, self.durable_key), (self.scoped, self.scoped_key)):
            try:
                store.delete(key)
            except Exception as e:
                logger.error(f"Failed to clear shared school selection ({key}): {e}")

    def _read_raw(self) -> Optional[str]:
        for store, key in ((self.durable, self.durable_key), (self.scoped, self.scoped_key)):
            try:
                raw = store.get(key)
            except Exception as e:
                logger.error(f"Failed to get shared school selection ({key}): {e}")
                continue
            if raw:
                return raw
        return None

    # -----------------------------------------------------
    # Post-login return path
    # -----------------------------------------------------
    def remember_return_to(self, url: str) -> None:
        try:
            self.durable.set(self.return_to_key, url, ttl_seconds=self.ttl_seconds)
        except Exception as e:
            logger.error(f"Failed to set auth redirect: {e}")

    def return_to(self) -> Optional[str]:
        try:
            return self.durable.get(self.return_to_key)
        except Exception as e:
            logger.error(f"Failed to get auth redirect: {e}")
            return None

    def forget_return_to(self) -> None:
        try:
            self.durable.delete(self.return_to_key)
        except Exception as e:
            logger.error(f"Failed to clear auth redirect: {e}")
