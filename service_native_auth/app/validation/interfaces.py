"""
Extension points a validator can be constructed with.

Each capability is an async callable so a plain ``async def`` works as an
override as well as a class implementing ``__call__``.
"""

from typing import Protocol


class SignatureVerifier(Protocol):
    """Decides whether ``signature`` was produced by ``address`` over ``message``."""

    async def __call__(self, address: str, message: str, signature: bytes) -> bool:
        ...


class OriginApprover(Protocol):
    """Last-resort approval for origins not in the accepted list."""

    async def __call__(self, origin: str) -> bool:
        ...


class ImpersonationApprover(Protocol):
    """Decides whether ``signer`` may act as ``target``."""

    async def __call__(self, signer: str, target: str) -> bool:
        ...
