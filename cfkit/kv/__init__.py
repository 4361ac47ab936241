"""Byte-valued cell backends for the reference session."""

from .base import KVStore
from .disk import Disk
from .keys import SortedKeys
from .memory import Memory

__all__ = ["Disk", "KVStore", "Memory", "SortedKeys"]
