# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
EagerOp Command Line Interface

Simple CLI for inspecting the native library and its devices.
"""

from __future__ import annotations

import argparse
import sys


def main(argv=None):
    """Main entry point for EagerOp CLI."""
    parser = argparse.ArgumentParser(
        prog="eagerop",
        description="EagerOp - eager operation binding for the TensorFlow C API",
    )

    parser.add_argument(
        "--version",
        "-v",
        action="store_true",
        help="Show version information",
    )

    parser.add_argument(
        "--info",
        action="store_true",
        help="Show system and native library information",
    )

    parser.add_argument(
        "--library",
        default=None,
        help="Path to the TensorFlow C library (overrides EAGEROP_LIBRARY_PATH)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "devices",
        help="List devices visible to a new eager context",
    )

    args = parser.parse_args(argv)

    if args.version:
        from eagerop import __version__

        print(f"EagerOp v{__version__}")
        return 0

    if args.info:
        return _show_info(args)

    if args.command == "devices":
        return _list_devices(args)

    # Default: show help
    parser.print_help()
    return 0


def _load(args):
    from eagerop.native import load_library, set_library

    library = load_library(args.library) if args.library else load_library()
    return set_library(library)


def _list_devices(args):
    """Print the devices of a fresh context as a table."""
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    from eagerop.eager import Context
    from eagerop.errors import EagerOpError

    console = Console()
    try:
        _load(args)
        with Context() as ctx:
            devices = ctx.list_devices()
    except EagerOpError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    table = Table(title="Eager devices")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Memory (MB)", justify="right")
    for device in devices:
        table.add_row(
            device.name,
            device.device_type,
            f"{device.memory_bytes / (1024 * 1024):.1f}",
        )
    console.print(table)
    return 0


def _show_info(args):
    """Show system and EagerOp information."""
    import platform

    from eagerop import __version__
    from eagerop.errors import EagerOpError

    print("=" * 50)
    print("EagerOp System Information")
    print("=" * 50)
    print(f"EagerOp Version: {__version__}")
    print(f"Python Version: {platform.python_version()}")
    print(f"Platform: {platform.platform()}")

    try:
        library = _load(args)
    except EagerOpError as e:
        print(f"Native Library: not found ({e.message})")
        print("=" * 50)
        return 1

    print(f"Native Library: {library.path}")
    print(f"TensorFlow Version: {library.version()}")
    print("=" * 50)
    return 0


if __name__ == "__main__":
    sys.exit(main())
