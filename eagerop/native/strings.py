# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
String marshalling between Python and NUL-terminated C strings.
"""

from typing import Optional, Union

from ..errors import NulByteError, StringDecodeError


def encode_c_string(value: Union[str, bytes], parameter: Optional[str] = None) -> bytes:
    """
    Encode a name for a ``const char*`` parameter.

    Raises:
        NulByteError: If the value contains an embedded NUL byte.
    """
    raw = value if isinstance(value, bytes) else value.encode("utf-8")
    if b"\x00" in raw:
        text = value if isinstance(value, str) else value.decode("utf-8", "replace")
        raise NulByteError(text, parameter=parameter)
    return raw


def encode_bytes(value: Union[str, bytes]) -> bytes:
    """Encode a length-delimited string value; NUL bytes are allowed."""
    return value if isinstance(value, bytes) else value.encode("utf-8")


def decode_c_string(raw: Optional[bytes], source: Optional[str] = None) -> str:
    """
    Decode a string returned by the native library.

    Raises:
        StringDecodeError: If the bytes are not valid UTF-8.
    """
    if raw is None:
        return ""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise StringDecodeError(raw, source=source) from None
