"""
Command-line interface for monlayout.

Usage:
    monlayout [options] command [command options]

Commands:
    save      Save the current monitor layout
    restore   Restore the saved layout onto the connected monitors
    info      Show connected monitors and their identity keys
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config
from .config.main import VALID_BACKENDS
from .exceptions import (
    MonLayoutError,
    ConfigError,
    ConfigParseError,
    ConfigValidationError,
    DuplicateIdentityError,
    StoreNotFoundError,
    StoreError,
    EnumerationError,
    CompositorNotFoundError,
)
from .commands import save_layout, restore_layout, show_info

EX_DATAERR = 65
EX_NOINPUT = 66
EX_UNAVAILABLE = 69
EX_CANTCREAT = 73
EX_CONFIG = 78


def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="monlayout",
        description="Save and restore monitor layouts on Wayland compositors"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to config file"
    )
    parser.add_argument(
        "--backend",
        choices=VALID_BACKENDS,
        help="Compositor backend (default: wlr-randr)"
    )
    parser.add_argument(
        "--executable",
        type=str,
        help="Path to the backend's executable"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("save", help="Save the current layout")

    restore_parser = subparsers.add_parser("restore", help="Restore the saved layout")
    restore_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the restore plan without applying it"
    )
    restore_parser.add_argument(
        "--fallback-to-default",
        action="store_true",
        default=None,
        help="If no layout is saved, enable all monitors at their preferred modes"
    )

    info_parser = subparsers.add_parser("info", help="Show connected monitors")
    info_parser.add_argument("--json", action="store_true", help="Output JSON")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logger = logging.getLogger(__name__)

    try:
        # Load config
        config = Config.load(config_file=args.config)
        config = config.with_overrides(backend=args.backend, executable=args.executable)

        # Setup logging
        level = "DEBUG" if args.verbose else config.logging.level
        setup_logging(level)

        # Dispatch command
        if args.command == "save":
            save_layout(config)
        elif args.command == "restore":
            if args.dry_run:
                print("Restore plan:")
            result = restore_layout(
                config,
                dry_run=args.dry_run,
                fallback_to_default=args.fallback_to_default,
            )
            if not result.ok:
                print(f"\n❌ Failed to configure: {', '.join(result.failed)}", file=sys.stderr)
                return 1
        elif args.command == "info":
            show_info(config, json_output=args.json)
        else:
            parser.print_help()
            return 1

        return 0

    # Handle specific error types with appropriate exit codes and messages
    except KeyboardInterrupt:
        print("\nCancelled by user", file=sys.stderr)
        return 130

    except StoreNotFoundError as e:
        print(f"\n❌ No Saved Layout: {e}", file=sys.stderr)
        print("\nUse 'restore --fallback-to-default' to enable all monitors anyway.", file=sys.stderr)
        return EX_NOINPUT

    except DuplicateIdentityError as e:
        print(f"\n❌ Ambiguous Monitors: {e}", file=sys.stderr)
        return EX_DATAERR

    except ConfigParseError as e:
        print(f"\n❌ Parse Error: {e}", file=sys.stderr)
        return EX_CONFIG

    except ConfigValidationError as e:
        print(f"\n❌ Configuration Validation Error: {e}", file=sys.stderr)
        return EX_CONFIG

    except ConfigError as e:
        print(f"\n❌ Configuration Error: {e}", file=sys.stderr)
        return EX_CONFIG

    except CompositorNotFoundError as e:
        print(f"\n❌ Compositor Tool Not Found\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        print("\nMake sure your Wayland compositor is running.", file=sys.stderr)
        return EX_UNAVAILABLE

    except EnumerationError as e:
        print(f"\n❌ Output Enumeration Failed: {e}", file=sys.stderr)
        return EX_UNAVAILABLE

    except StoreError as e:
        print(f"\n❌ Cannot Write Layout: {e}", file=sys.stderr)
        return EX_CANTCREAT

    except MonLayoutError as e:
        # Catch-all for any other monlayout errors
        print(f"\n❌ Error: {e}", file=sys.stderr)
        logger.error(str(e))
        if args.verbose:
            raise
        return 1

    except Exception as e:
        # Unexpected errors - show full traceback in verbose mode
        print(f"\n❌ Unexpected Error: {type(e).__name__}: {e}", file=sys.stderr)
        logger.error(f"Unexpected error: {type(e).__name__}: {e}")
        if args.verbose:
            raise
        print("\nRun with -v/--verbose for full traceback.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
