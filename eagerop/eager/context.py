# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Eager Context - the native runtime that op descriptors execute against.

Example:
    with Context(ContextOptions(async_execution=False)) as ctx:
        for device in ctx.list_devices():
            print(device.name, device.device_type)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import get_config
from ..core.types import DevicePlacementPolicy
from ..native.handle import NativeHandle
from ..native.library import TFLibrary, get_library
from ..native.status import Status
from ..native.strings import decode_c_string

logger = logging.getLogger("eagerop.eager.context")


@dataclass
class DeviceInfo:
    """A device visible to a context."""

    name: str
    device_type: str
    memory_bytes: int = 0


class ContextOptions(NativeHandle):
    """
    Owned TFE_ContextOptions.

    Unset arguments fall back to the active EagerOpConfig.
    """

    _kind = "context options"
    _deleter = "TFE_DeleteContextOptions"

    def __init__(
        self,
        async_execution: Optional[bool] = None,
        config: Optional[bytes] = None,
        placement_policy: Optional[DevicePlacementPolicy] = None,
        library: Optional[TFLibrary] = None,
    ):
        """
        Args:
            async_execution: Run ops asynchronously.
            config: Serialized ``tensorflow.ConfigProto``.
            placement_policy: Reaction to inputs on the wrong device.
            library: Native library; defaults to the process-wide one.
        """
        library = library if library is not None else get_library()
        super().__init__(library.TFE_NewContextOptions(), library)

        defaults = get_config()
        if async_execution is None:
            async_execution = defaults.async_execution
        if placement_policy is None:
            placement_policy = defaults.placement_policy

        self.async_execution = bool(async_execution)
        self.placement_policy = placement_policy
        library.TFE_ContextOptionsSetAsync(self.handle, 1 if self.async_execution else 0)
        if placement_policy is not None:
            library.TFE_ContextOptionsSetDevicePlacementPolicy(
                self.handle, DevicePlacementPolicy(placement_policy).value
            )
        if config is not None:
            self.set_config(config)

    def set_config(self, config: bytes) -> None:
        """Apply a serialized ConfigProto."""
        with Status(self._library) as status:
            self._library.TFE_ContextOptionsSetConfig(
                self.handle, config, len(config), status.handle
            )
            status.raise_for_status(operation="TFE_ContextOptionsSetConfig")


class Context(NativeHandle):
    """
    Owned TFE_Context.

    Descriptors and tensor handles keep a reference to the context they
    were created in, so it is not collected before them. Closing it
    explicitly while they are still in use is a caller error.
    """

    _kind = "context"
    _deleter = "TFE_DeleteContext"

    def __init__(
        self,
        options: Optional[ContextOptions] = None,
        library: Optional[TFLibrary] = None,
    ):
        if library is None:
            library = options.library if options is not None else get_library()

        owned_options = options is None
        if owned_options:
            options = ContextOptions(library=library)
        try:
            with Status(library) as status:
                handle = library.TFE_NewContext(options.handle, status.handle)
                status.raise_for_status(operation="TFE_NewContext")
        finally:
            if owned_options:
                options.close()

        super().__init__(handle, library)
        logger.debug("Created eager context")

    def list_devices(self) -> list[DeviceInfo]:
        """List the devices this context can place ops on."""
        lib = self._library
        with Status(lib) as status:
            device_list = lib.TFE_ContextListDevices(self.handle, status.handle)
            status.raise_for_status(operation="TFE_ContextListDevices")
            try:
                devices = []
                for i in range(lib.TF_DeviceListCount(device_list)):
                    name = lib.TF_DeviceListName(device_list, i, status.handle)
                    status.raise_for_status(operation="TF_DeviceListName")
                    device_type = lib.TF_DeviceListType(device_list, i, status.handle)
                    status.raise_for_status(operation="TF_DeviceListType")
                    memory = lib.TF_DeviceListMemoryBytes(device_list, i, status.handle)
                    status.raise_for_status(operation="TF_DeviceListMemoryBytes")
                    devices.append(
                        DeviceInfo(
                            name=decode_c_string(name, source="TF_DeviceListName"),
                            device_type=decode_c_string(device_type, source="TF_DeviceListType"),
                            memory_bytes=memory,
                        )
                    )
            finally:
                lib.TF_DeleteDeviceList(device_list)
        return devices

    def clear_caches(self) -> None:
        """Drop cached kernels and function definitions."""
        self._library.TFE_ContextClearCaches(self.handle)
