"""Zap error classes.

PreconditionViolation and SlippageViolation abort the whole operation;
AuthorizationFailure is carried inside AccessResult values instead of
being raised.
"""


class ZapError(Exception):
    """Base error for zap operations."""

    pass


class PreconditionViolation(ZapError):
    """Inputs or collaborators do not satisfy an operation's preconditions."""

    pass


class InvalidPool(PreconditionViolation):
    """The token pair does not belong to the named pool."""

    pass


class UnlistedFactory(PreconditionViolation):
    """The pool's factory is not on the access-control whitelist."""

    pass


class DeadlineExpired(PreconditionViolation):
    """The validity window of the request has passed."""

    pass


class ZeroReserves(PreconditionViolation):
    """A pool reserve is zero where the math needs a non-zero denominator."""

    pass


class InvalidTradeInfo(PreconditionViolation):
    """A trade-info snapshot violates v >= r or 0 <= fee < PRECISION."""

    pass


class InsufficientLiquidity(PreconditionViolation):
    """The pool cannot pay out the requested amount."""

    pass


class InsufficientBalance(PreconditionViolation):
    """An account does not hold enough tokens for a transfer."""

    pass


class SlippageViolation(ZapError):
    """A computed result fell short of the caller's minimum."""

    pass


class InsufficientMintedLiquidity(SlippageViolation):
    """Minted LP tokens are below min_lp_qty."""

    pass


class InsufficientOutput(SlippageViolation):
    """Total output token amount is below min_token_out."""

    pass


class AuthorizationFailure(ZapError):
    """Caller is not allowed to perform an administrative operation."""

    pass
