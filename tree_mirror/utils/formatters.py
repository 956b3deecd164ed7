"""Formatting utilities for mirror run reports."""

from datetime import datetime
from typing import Dict, List, Optional

from ..core.models import RunStats

GIGABYTE = 1024 * 1024 * 1024


def format_gigabytes(size_bytes: int) -> str:
    """Format a byte count as whole gigabytes.
    
    Args:
        size_bytes: Size in bytes.
        
    Returns:
        Size string such as ``"42 GB"``.
    """
    return f"{size_bytes // GIGABYTE} GB"


def format_date(dt: datetime) -> str:
    """Format datetime for display.
    
    Args:
        dt: Datetime to format.
        
    Returns:
        Formatted date string.
    """
    return dt.strftime('%Y-%m-%d %H:%M:%S')


def format_stats_lines(stats: RunStats) -> List[str]:
    """Counter lines shared by the log file and the console summary."""
    return [
        f"{stats.files_checked_count} files checked",
        f"{stats.folders_checked_count} folders checked",
        f"{stats.copy_success_count} out of {stats.should_copy_count} files copied.",
        f"{stats.error_count} errors occurred.",
    ]


def format_summary(stats: RunStats, elapsed_seconds: float,
                   disk: Optional[Dict[str, int]] = None, indent: str = "") -> str:
    """Build the human readable end-of-run summary.
    
    Args:
        stats: Final counters of the run.
        elapsed_seconds: Wall clock duration of the walk.
        disk: Optional ``{'free': ..., 'total': ...}`` byte counts of the destination volume.
        indent: Prefix for every line after the first.
        
    Returns:
        Multi-line summary text.
    """
    lines = [f"Time elapsed: {elapsed_seconds:.3f} seconds"]
    lines.extend(format_stats_lines(stats))
    if disk:
        lines.append(f"{format_gigabytes(disk['free'])} free")
        lines.append(f"{format_gigabytes(disk['total'])} total")
    
    return "Backup Complete!!\n" + "\n".join(indent + line for line in lines)
