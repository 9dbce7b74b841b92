# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
TF_Status wrapper.

A fresh Status is created for each fallible native call and checked
right after it:

    with Status(lib) as status:
        lib.TFE_OpAddInput(op, handle, status.handle)
        status.raise_for_status()
"""

from typing import Optional

from ..core.types import StatusCode
from ..errors import error_from_status
from .handle import NativeHandle
from .library import TFLibrary, get_library


class Status(NativeHandle):
    """Owned TF_Status out-parameter."""

    _kind = "status"
    _deleter = "TF_DeleteStatus"

    def __init__(self, library: Optional[TFLibrary] = None):
        library = library if library is not None else get_library()
        super().__init__(library.TF_NewStatus(), library)

    @property
    def code(self) -> StatusCode:
        return StatusCode.from_c(self._library.TF_GetCode(self.handle))

    @property
    def message(self) -> str:
        raw = self._library.TF_Message(self.handle)
        if raw is None:
            return ""
        return raw.decode("utf-8", "replace")

    def is_ok(self) -> bool:
        return self.code == StatusCode.Ok

    def raise_for_status(self, **context) -> None:
        """
        Raise the StatusError matching a non-OK status.

        Args:
            **context: Debugging context attached to the error.
        """
        code = self.code
        if code != StatusCode.Ok:
            raise error_from_status(code, self.message, context or None)

    def __repr__(self) -> str:
        if self.closed:
            return "Status(<released>)"
        return f"Status({self.code.name}, {self.message!r})"
