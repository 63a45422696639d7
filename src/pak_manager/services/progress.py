"""Report callback type shared by the archive services."""

from collections.abc import Callable

ReportCallback = Callable[[str, str], None]
"""Receives one report line as ``(action, message)``, e.g. ``("extract", "maps/e1m1.bsp")``."""


def noop_report(action: str, message: str) -> None:
    pass
