"""cfkit: typed row/column templates over a wide-column store."""

from .errors import (
    CfkitError,
    DefaultExceptionsTranslator,
    ExceptionsTranslator,
    InvalidQueryError,
    InvalidRequestError,
    StoreError,
    StoreTimeoutError,
    StoreUnavailableError,
    TranslatedStoreError,
)
from .factory import template
from .mutation import Mutation, MutationResult, Mutator
from .predicate import (
    ALL_COLUMNS_COUNT,
    ALL_COLUMNS_END,
    ALL_COLUMNS_START,
    DEFAULT_COUNT,
    BytesPredicate,
    SlicePredicate,
)
from .result import Column, ColumnFamilyResult
from .serializers import Serializer
from .session import MemorySession, Session
from .template import ColumnFamilyTemplate
from .updater import TemplateUpdater

__all__ = [
    "ALL_COLUMNS_COUNT",
    "ALL_COLUMNS_END",
    "ALL_COLUMNS_START",
    "BytesPredicate",
    "CfkitError",
    "Column",
    "ColumnFamilyResult",
    "ColumnFamilyTemplate",
    "DEFAULT_COUNT",
    "DefaultExceptionsTranslator",
    "ExceptionsTranslator",
    "InvalidQueryError",
    "InvalidRequestError",
    "MemorySession",
    "Mutation",
    "MutationResult",
    "Mutator",
    "Serializer",
    "Session",
    "SlicePredicate",
    "StoreError",
    "StoreTimeoutError",
    "StoreUnavailableError",
    "TemplateUpdater",
    "TranslatedStoreError",
    "template",
]
