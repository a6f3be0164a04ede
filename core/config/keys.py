"""
Trusted Notary Key

The single process-wide notary public key that session headers are
verified against. It starts as the configured default and can be replaced
at any time; readers always get a complete immutable snapshot, so a
verification that captured a key keeps using it even if the key is
replaced while it runs.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from cryptography.hazmat.primitives.asymmetric import ec

from core.config.runtime import DEFAULT_NOTARY_PEM
from core.crypto.signatures import key_fingerprint, load_public_key_pem


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrustedKey:
    """Immutable snapshot of a validated notary public key."""
    pem: str
    public_key: ec.EllipticCurvePublicKey = field(repr=False, compare=False)
    fingerprint: str = ""

    @classmethod
    def from_pem(cls, pem: str) -> "TrustedKey":
        """
        Raises:
            KeyInvalidException: If pem is not a P-256 public key
        """
        public_key = load_public_key_pem(pem)
        return cls(pem=pem.strip(), public_key=public_key, fingerprint=key_fingerprint(public_key))


KeyListener = Callable[[TrustedKey], None]


class TrustedKeyStore:
    """
    Holder of the active notary key.

    Replacement validates first and swaps second: an invalid PEM raises
    KeyInvalidException and leaves the previous key active.
    """

    def __init__(self, initial: Optional[TrustedKey | str] = None):
        if initial is None:
            initial = DEFAULT_NOTARY_PEM
        if isinstance(initial, str):
            initial = TrustedKey.from_pem(initial)
        self._key = initial
        self._lock = threading.Lock()
        self._listeners: list[KeyListener] = []

    def current(self) -> TrustedKey:
        """Snapshot of the active key."""
        with self._lock:
            return self._key

    def replace(self, pem: str) -> TrustedKey:
        """
        Validate pem and make it the active key.

        Returns:
            The new active key

        Raises:
            KeyInvalidException: If pem is unusable; the active key is unchanged
        """
        key = TrustedKey.from_pem(pem)
        with self._lock:
            self._key = key
            listeners = list(self._listeners)
        logger.info(f"Notary key replaced: {key.fingerprint}")
        self._notify(listeners, key)
        return key

    def reset(self) -> TrustedKey:
        """Return to the default notary key."""
        return self.replace(DEFAULT_NOTARY_PEM)

    def subscribe(self, listener: KeyListener) -> Callable[[], None]:
        """
        Register a callback for key replacements.

        Returns:
            A function that unregisters the callback
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    @staticmethod
    def _notify(listeners: list[KeyListener], key: TrustedKey) -> None:
        for listener in listeners:
            try:
                listener(key)
            except Exception:
                # A broken subscriber must not undo a completed replacement
                logger.exception(f"Key change listener {listener!r} failed")


_global_store: Optional[TrustedKeyStore] = None
_global_store_lock = threading.Lock()


def get_trusted_key_store() -> TrustedKeyStore:
    """Get the process-wide trusted key store."""
    global _global_store
    with _global_store_lock:
        if _global_store is None:
            _global_store = TrustedKeyStore()
        return _global_store
