"""
Console scanner screen for CBY Helper.

Hardware scanners in keyboard-wedge mode type the barcode payload and press
Enter, so each line read from the terminal is one committed scan.

Commands:
    :r, :refresh   Reload the hub directory in the background
    :d, :dismiss   Dismiss the "Invalid Barcode" notice
    :q, :quit      Exit (EOF works too)
"""

import sys
from typing import Optional, TextIO

from cby_helper.common.logger import setup_logger
from cby_helper.scanner.session import ScannerSession
from cby_helper.scanner.state import ScannerState, ScanStatus

logger = setup_logger(__name__)

INVALID_BARCODE = "Invalid Barcode"

REFRESH_COMMANDS = (":r", ":refresh")
DISMISS_COMMANDS = (":d", ":dismiss")
QUIT_COMMANDS = (":q", ":quit")


def format_state(state: ScannerState) -> str:
    """Render the scanner panel as text."""
    if state.status == ScanStatus.RESOLVED and state.record is not None:
        record = state.record
        return (
            f"{record.hub_name}\n"
            f"  Sack Segregation: {record.sack_code}\n"
            f"  OSA Lane:         {record.osa_lane}"
        )
    if state.status == ScanStatus.INVALID:
        return f"X {INVALID_BARCODE}"
    return "Scan AWB"


class ConsoleScreen:
    """Line-oriented scanner screen on top of a ScannerSession."""

    def __init__(
        self,
        session_factory=ScannerSession,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        **session_kwargs
    ):
        """
        Args:
            session_factory: Callable building the session; receives the
                screen's callbacks as keyword arguments
            stdin: Input stream (default sys.stdin)
            stdout: Output stream (default sys.stdout)
            session_kwargs: Extra arguments for session_factory
        """
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.session = session_factory(
            on_refreshed=self._show_refreshed,
            on_refresh_failed=self._show_refresh_failed,
            **session_kwargs
        )

    def _print(self, text: str) -> None:
        print(text, file=self.stdout, flush=True)

    def _show_refreshed(self, hub_count: int) -> None:
        self._print(f"Data refreshed ({hub_count} hubs)")

    def _show_refresh_failed(self, error: str) -> None:
        self._print(f"Refresh failed, keeping previous data: {error}")

    def handle_line(self, line: str) -> bool:
        """
        Handle one input line.

        Returns:
            False when the screen should exit
        """
        text = line.strip()
        if not text:
            return True

        command = text.lower()
        if command in QUIT_COMMANDS:
            return False

        if command in REFRESH_COMMANDS:
            self.session.refresh()
            self._print("Refreshing data...")
            return True

        if command in DISMISS_COMMANDS:
            if self.session.dismiss():
                self._print(format_state(self.session.state))
            return True

        state = self.session.submit(text)
        self._print(format_state(state))
        return True

    def run(self) -> None:
        """Read scans until quit or EOF."""
        self._print("CBY Helper - Shipment Scanning (:r refresh, :q quit)")
        try:
            for line in self.stdin:
                if not self.handle_line(line):
                    break
        except KeyboardInterrupt:
            pass
        finally:
            self.session.close()
            logger.info("Console screen closed")
