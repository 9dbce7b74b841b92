# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Exclusive ownership of native pointers.

Every wrapper around a TF_* / TFE_* object derives from NativeHandle: it
owns exactly one pointer and hands it back to its deleter exactly once,
whether released through close(), a with-block or garbage collection.
"""

from typing import Any, Optional

from ..errors import ClosedHandleError
from .library import TFLibrary, get_library


class NativeHandle:
    """Base class for objects owning one native pointer."""

    # Human-readable kind, used in ClosedHandleError messages
    _kind = "native handle"
    # Name of the C function releasing the pointer
    _deleter = ""

    def __init__(self, handle: Any, library: Optional[TFLibrary] = None):
        self._library = library if library is not None else get_library()
        self._handle = handle

    @property
    def library(self) -> TFLibrary:
        return self._library

    @property
    def handle(self) -> Any:
        """The owned native pointer."""
        if self._handle is None:
            raise ClosedHandleError(self._kind)
        return self._handle

    @property
    def closed(self) -> bool:
        return self._handle is None

    def close(self) -> None:
        """Release the native pointer. Safe to call more than once."""
        handle, self._handle = self._handle, None
        if handle is not None:
            getattr(self._library, self._deleter)(handle)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __del__(self):
        if getattr(self, "_handle", None) is not None:
            self.close()
