"""TemplateUpdater: stage column writes for a row through a template."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .mutation import Mutator, MutationResult
from .serializers import Serializer

if TYPE_CHECKING:
    from .template import ColumnFamilyTemplate


class TemplateUpdater:
    """Stages writes and deletes for one row at a time.

    Values are encoded with an explicit serializer or the one registered
    on the template for that column. ``update()`` hands the mutator back
    to the template, which flushes it unless the template is batched.
    """

    def __init__(
        self, template: ColumnFamilyTemplate, mutator: Mutator, key: Any = None
    ) -> None:
        self._template = template
        self._mutator = mutator
        self._key = key

    @property
    def key(self) -> Any:
        return self._key

    @property
    def current_mutator(self) -> Mutator:
        return self._mutator

    def add_key(self, key: Any) -> TemplateUpdater:
        """Direct further staging at another row of the same column family."""
        self._key = key
        return self

    def _require_key(self) -> Any:
        if self._key is None:
            raise ValueError("No row key set; call add_key() first")
        return self._key

    def set_value(
        self, name: Any, value: Any, serializer: Serializer | None = None
    ) -> TemplateUpdater:
        """Stage a write of ``value`` to column ``name``.

        Raises:
            KeyError: No serializer given and none registered for ``name``.
        """
        if serializer is None:
            serializer = self._template.get_value_serializer(name)
        if serializer is None:
            raise KeyError(f"No value serializer registered for column {name!r}")
        self._mutator.add_insertion(
            self._require_key(),
            self._template.column_family,
            name,
            value,
            self._template.top_serializer,
            serializer,
            clock=self._template.effective_clock(),
        )
        return self

    def delete_column(self, name: Any) -> TemplateUpdater:
        """Stage deletion of one column of the current row."""
        self._mutator.add_deletion(
            self._require_key(),
            self._template.column_family,
            name,
            self._template.top_serializer,
            clock=self._template.effective_clock(),
        )
        return self

    def update(self) -> MutationResult | None:
        """Flush through the template (a no-op while it is batched)."""
        return self._template.update(self)
