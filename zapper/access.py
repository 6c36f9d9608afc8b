"""Access control for zap administration.

AccessControl is an immutable value: administrative operations return an
AccessResult holding either the updated value or the AuthorizationFailure
that prevented the change. Nothing in here raises on a denied caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from zapper.errors import AuthorizationFailure
from zapper.models.types import normalize_address


@dataclass(frozen=True)
class AccessResult:
    """Outcome of an administrative operation.

    Attributes:
        access: The updated AccessControl, or None if the operation was denied
        error: The failure that denied the operation, if any

    Examples:
        result = access.set_factory_whitelisted(owner, factory, True)
        assert result.is_ok

        result = access.set_factory_whitelisted(stranger, factory, True)
        assert isinstance(result.error, AuthorizationFailure)
    """

    access: AccessControl | None
    error: AuthorizationFailure | None = None

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, access: AccessControl) -> AccessResult:
        return cls(access=access)

    @classmethod
    def denied(cls, detail: str) -> AccessResult:
        return cls(access=None, error=AuthorizationFailure(detail))


@dataclass(frozen=True)
class AccessControl:
    """Owner and factory whitelist of a zap orchestrator.

    Attributes:
        owner: Address allowed to change this configuration
        whitelisted_factories: Normalized factory addresses zaps may use
    """

    owner: str
    whitelisted_factories: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "owner", normalize_address(self.owner))
        object.__setattr__(
            self,
            "whitelisted_factories",
            frozenset(normalize_address(f) for f in self.whitelisted_factories),
        )

    def is_factory_whitelisted(self, factory: str) -> bool:
        return normalize_address(factory) in self.whitelisted_factories

    def set_factory_whitelisted(self, caller: str, factory: str, allowed: bool) -> AccessResult:
        """Add or remove a factory from the whitelist (owner only)."""
        if not self._is_owner(caller):
            return AccessResult.denied(f"{caller} is not the owner")
        factory_norm = normalize_address(factory)
        if allowed:
            factories = self.whitelisted_factories | {factory_norm}
        else:
            factories = self.whitelisted_factories - {factory_norm}
        return AccessResult.ok(replace(self, whitelisted_factories=factories))

    def transfer_ownership(self, caller: str, new_owner: str) -> AccessResult:
        """Hand the configuration over to a new owner (owner only)."""
        if not self._is_owner(caller):
            return AccessResult.denied(f"{caller} is not the owner")
        return AccessResult.ok(replace(self, owner=new_owner))

    def _is_owner(self, caller: str) -> bool:
        return normalize_address(caller) == self.owner
