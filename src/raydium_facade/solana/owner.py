"""Wallet owner identity."""

from typing import Any


class Owner:
    """
    Owner of the wallet the facade acts for.

    Parameters
    ----------
    owner : str | Any
        Base58 public key, or a keypair-like object exposing ``pubkey()``

    """

    def __init__(self, owner: Any) -> None:
        if isinstance(owner, str):
            if not owner:
                msg = "Owner public key must not be empty"
                raise ValueError(msg)
            self._public_key = owner
            self._signer = None
        elif callable(getattr(owner, "pubkey", None)):
            self._public_key = str(owner.pubkey())
            self._signer = owner
        else:
            msg = f"Unsupported owner type: {type(owner).__name__}"
            raise TypeError(msg)

    @property
    def public_key(self) -> str:
        return self._public_key

    @property
    def signer(self) -> Any | None:
        """The keypair, or None when only a public key is known."""
        return self._signer

    @property
    def is_keypair(self) -> bool:
        return self._signer is not None

    def __repr__(self) -> str:
        return f"Owner({self._public_key!r})"
