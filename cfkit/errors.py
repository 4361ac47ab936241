"""cfkit error types and exceptions translation."""

from typing import Protocol, runtime_checkable


class CfkitError(Exception):
    """Base of the layer-neutral error taxonomy."""


class StoreError(Exception):
    """Raw failure reported by a store session.

    Sessions raise these (or transport errors such as ``TimeoutError``)
    as-is. They only become ``CfkitError`` subclasses when a template has
    an exceptions translator installed.
    """


class InvalidRequestError(StoreError):
    """The store rejected a request, e.g. a negative slice count."""


class TranslatedStoreError(CfkitError):
    """A store failure mapped into the layer-neutral taxonomy.

    The original exception is kept as ``__cause__``.
    """


class StoreTimeoutError(TranslatedStoreError):
    """The store did not answer in time."""


class StoreUnavailableError(TranslatedStoreError):
    """The store could not be reached."""


class InvalidQueryError(TranslatedStoreError):
    """The store refused the request as invalid."""


@runtime_checkable
class ExceptionsTranslator(Protocol):
    """Maps a raw store exception to the exception the caller should see."""

    def translate(self, exc: Exception) -> Exception: ...


class DefaultExceptionsTranslator:
    """Maps transport and store errors onto ``TranslatedStoreError`` types."""

    def translate(self, exc: Exception) -> Exception:
        if isinstance(exc, CfkitError):
            return exc
        if isinstance(exc, TimeoutError):
            return StoreTimeoutError(str(exc) or "store timed out")
        if isinstance(exc, ConnectionError):
            return StoreUnavailableError(str(exc) or "store unavailable")
        if isinstance(exc, InvalidRequestError):
            return InvalidQueryError(str(exc))
        return TranslatedStoreError(f"{type(exc).__name__}: {exc}")
