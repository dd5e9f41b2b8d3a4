from __future__ import annotations


class FatalStreamError(Exception):
    """Unrecoverable condition; the process must not keep streaming."""


class ProviderError(FatalStreamError):
    """A refresh-then-read unit failed while holding the provider lock."""


class ProviderPoisonedError(ProviderError):
    """The provider was left inconsistent by an earlier failure."""


class EncodingError(FatalStreamError):
    """A payload could not be rendered as a JSON frame."""
