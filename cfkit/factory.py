"""Template factory function."""

from typing import Any, Literal, Mapping

from .errors import ExceptionsTranslator
from .kv.memory import Memory
from .predicate import DEFAULT_COUNT
from .serializers import STRING, Serializer
from .session import MemorySession, Session
from .template import ColumnFamilyTemplate


def template(
    column_family: str,
    *,
    kind: Literal["memory", "disk"] = "memory",
    path: str | None = None,
    session: Session | None = None,
    key_serializer: Serializer = STRING,
    name_serializer: Serializer = STRING,
    columns: Mapping[Any, Serializer] | None = None,
    batched: bool = False,
    clock: int | None = None,
    count: int = DEFAULT_COUNT,
    exceptions_translator: ExceptionsTranslator | None = None,
) -> ColumnFamilyTemplate:
    """Create a configured ColumnFamilyTemplate.

    Args:
        column_family: Column family the template is bound to.
        kind: Backend for the reference session when ``session`` is not
            given: ``"memory"`` (default) or ``"disk"``.
        path: Required when ``kind="disk"``. Directory for the disk backend.
        session: An existing session to use instead of building one.
        key_serializer: Row key serializer (default ``STRING``).
        name_serializer: Column name serializer (default ``STRING``).
        columns: Column name to value serializer registrations.
        batched: Defer flushes of caller-supplied mutators.
        clock: Override clock for every write and delete.
        count: Column limit for range reads.
        exceptions_translator: Maps store errors before they propagate.

    Returns:
        A ``ColumnFamilyTemplate`` instance.
    """
    if session is None:
        if kind == "memory":
            backend = Memory()
        elif kind == "disk":
            if path is None:
                raise ValueError("path is required when kind='disk'")
            from .kv.disk import Disk

            backend = Disk(path)
        else:
            raise ValueError(f"Unknown kind: {kind!r}")
        session = MemorySession(backend)

    cf_template = ColumnFamilyTemplate(
        session, column_family, key_serializer, name_serializer
    )
    for name, serializer in (columns or {}).items():
        cf_template.add_column(name, serializer)
    cf_template.set_batched(batched)
    cf_template.clock = clock
    cf_template.set_count(count)
    cf_template.set_exceptions_translator(exceptions_translator)
    return cf_template
