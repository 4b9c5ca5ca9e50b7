"""
Utilities Module

File I/O and console output helpers used throughout the application.
"""

import os
import sys
from typing import Union

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table


class FileIOError(Exception):
    """Raised when an input file cannot be read or an output file cannot be written."""
    pass


PathLike = Union[str, os.PathLike]


def read_file(file_path: PathLike) -> bytes:
    """
    Read a whole file into memory.

    Args:
        file_path: Path to file

    Returns:
        File contents

    Raises:
        FileIOError: If the file cannot be opened or read
    """
    try:
        with open(file_path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise FileIOError(f"Cannot open file: {file_path} ({e.strerror or e})") from e


def write_file(file_path: PathLike, data: bytes) -> None:
    """
    Write data to a file, replacing any previous contents.

    A partially written file is removed if the write fails.

    Args:
        file_path: Path to file
        data: Bytes to write

    Raises:
        FileIOError: If the file cannot be opened or written
    """
    try:
        f = open(file_path, 'wb')
    except OSError as e:
        raise FileIOError(f"Cannot open file: {file_path} ({e.strerror or e})") from e

    try:
        with f:
            f.write(data)
    except OSError as e:
        try:
            os.remove(file_path)
        except OSError:
            pass
        raise FileIOError(f"Failed to write file: {file_path} ({e.strerror or e})") from e


def format_iv(iv: bytes) -> str:
    """Format an IV as space separated hex bytes."""
    return " ".join(f"{b:02x}" for b in iv)


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string
    """
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB", "PB"]
    i = 0
    size = float(size_bytes)

    while size >= 1024.0 and i < len(size_names) - 1:
        size /= 1024.0
        i += 1

    return f"{size:.1f} {size_names[i]}"


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format."""
    if seconds < 1:
        return f"{seconds*1000:.0f} ms"
    elif seconds < 60:
        return f"{seconds:.1f} s"
    else:
        return f"{seconds / 60:.1f} min"


def print_error(message: str, use_rich: bool = True) -> None:
    """
    Print error message to stderr.

    Args:
        message: Error message
        use_rich: Use rich formatting
    """
    if use_rich:
        console = Console(stderr=True)
        console.print(Panel(f"[red]Error: {escape(message)}[/red]", title="Error"))
    else:
        print(f"Error: {message}", file=sys.stderr)


def print_success(message: str, use_rich: bool = True) -> None:
    """
    Print success message.

    Args:
        message: Success message
        use_rich: Use rich formatting
    """
    if use_rich:
        console = Console()
        console.print(Panel(f"[green]{escape(message)}[/green]", title="Success"))
    else:
        print(message)


def print_warning(message: str, use_rich: bool = True) -> None:
    """Print warning message to stderr."""
    if use_rich:
        console = Console(stderr=True)
        console.print(Panel(f"[yellow]{escape(message)}[/yellow]", title="Warning"))
    else:
        print(f"Warning: {message}", file=sys.stderr)


def print_info(message: str, use_rich: bool = True) -> None:
    """Print a plain informational line."""
    if use_rich:
        # highlight=False keeps hex IVs from being recoloured as numbers
        Console(highlight=False).print(message, markup=False)
    else:
        print(message)


def create_table(headers: list, rows: list, use_rich: bool = True) -> None:
    """
    Display data in table format.

    Args:
        headers: Table headers
        rows: Table rows
        use_rich: Use rich formatting
    """
    if use_rich:
        console = Console()
        table = Table(show_header=True, header_style="bold magenta")

        for header in headers:
            table.add_column(header)

        for row in rows:
            table.add_row(*[str(cell) for cell in row])

        console.print(table)
    else:
        col_widths = [len(str(header)) for header in headers]
        for row in rows:
            for i, cell in enumerate(row):
                col_widths[i] = max(col_widths[i], len(str(cell)))

        header_row = " | ".join(str(headers[i]).ljust(col_widths[i]) for i in range(len(headers)))
        print(header_row)
        print("-" * len(header_row))

        for row in rows:
            print(" | ".join(str(row[i]).ljust(col_widths[i]) for i in range(len(row))))
