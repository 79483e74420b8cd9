"""
Entry point for: python3 -m cby_helper

Launches the console scanner screen.
"""

import argparse

from cby_helper.common.config import get_config
from cby_helper.common.logger import set_level, setup_logger
from cby_helper.scanner.session import ScannerSession
from cby_helper.ui.console import ConsoleScreen

logger = setup_logger("cby_helper")


def main(argv=None):
    """Main entry point for the console scanner."""
    parser = argparse.ArgumentParser(description="CBY Helper shipment scanner")
    parser.add_argument('--config', help="Config file path")
    parser.add_argument('--endpoint', help="Hub sheet endpoint override")
    parser.add_argument('--refresh-on-start', action='store_true',
                        help="Load the hub directory before the first scan")

    args = parser.parse_args(argv)

    config = get_config(args.config)
    if args.endpoint:
        config.set('sheet.endpoint', args.endpoint)
    set_level(config.log_level)

    logger.info("CBY Helper starting...")

    screen = ConsoleScreen(
        session_factory=lambda **callbacks: ScannerSession.from_config(config, **callbacks)
    )

    if args.refresh_on_start or config.refresh_on_start:
        screen.session.refresh()

    screen.run()


if __name__ == "__main__":
    main()
