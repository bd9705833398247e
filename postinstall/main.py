# fedora-postinstall/postinstall/main.py

import argparse
import logging
import subprocess
import sys
from contextlib import nullcontext
from typing import List, Mapping, Optional

from rich.table import Table

from postinstall import __version__
from postinstall import console_output as con
from postinstall.config import DEFAULT_CONFIG_PATH, MODULE_DEFAULTS, SUDO_REFRESH_INTERVAL
from postinstall.config_loader import load_configuration
from postinstall.context import RunOptions, run_context
from postinstall.errors import ConfigurationError, PostInstallError
from postinstall.flags import resolve_flags
from postinstall.logger_utils import app_logger, setup_logger
from postinstall.phases import PHASES
from postinstall.preflight import check_not_root, run_preflight
from postinstall.runner import run_phases
from postinstall.sudo_keeper import SudoKeepAlive


def _module_epilog() -> str:
    lines = ["modules (toggle with --<module> / --no-<module>):"]
    for name, default in MODULE_DEFAULTS.items():
        lines.append(f"  {name:<14}{'on' if default else 'off'}  {PHASES[name]['description']}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fedora-postinstall",
        description="Provision a fresh Fedora Workstation (GNOME) in one unattended run.",
        epilog=_module_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--dry-run", action="store_true",
                        help="Print every command instead of changing the system.")
    parser.add_argument("--list-modules", action="store_true",
                        help="Show the modules and whether they would run, then exit.")
    parser.add_argument("--config", metavar="PATH", default=str(DEFAULT_CONFIG_PATH),
                        help="Package catalog to use (default: the bundled packages.json).")
    parser.add_argument("--verbose", action="store_true", help="Write DEBUG-level details to the log file.")
    return parser


def print_module_table(modules: Mapping[str, bool]) -> None:
    table = Table(title="Modules", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Module", style="cyan")
    table.add_column("State")
    table.add_column("Description")
    for i, (name, info) in enumerate(PHASES.items(), start=1):
        state = "[green]enabled[/]" if modules.get(name) else "[dim]disabled[/]"
        table.add_row(str(i), name, state, info["description"])
    con.console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point. Returns the process exit code."""
    args, extra = build_parser().parse_known_args(argv)

    try:
        if args.list_modules:
            print_module_table(resolve_flags(extra))
            return 0

        # The log file lives under HOME, so it is opened only for a non-root run.
        check_not_root()
        setup_logger(log_level=logging.DEBUG if args.verbose else logging.INFO)
        run_preflight()
        options = RunOptions(modules=resolve_flags(extra), dry_run=args.dry_run, verbose=args.verbose)
        app_logger.info(f"fedora-postinstall {__version__} started with {sys.argv[1:] if argv is None else argv}")

        packages = load_configuration(args.config)
        if not packages:
            raise ConfigurationError(f"No usable package catalog at '{args.config}'.")

        if options.dry_run:
            con.print_panel("Dry run: commands are printed, nothing is changed.", title="fedora-postinstall",
                            style="yellow")

        keeper = nullcontext() if options.dry_run else SudoKeepAlive(SUDO_REFRESH_INTERVAL)
        with run_context(options, packages) as ctx, keeper:
            executed = run_phases(ctx)

    except KeyboardInterrupt:
        app_logger.warning("Interrupted by user.")
        con.print_warning("\nInterrupted. Exiting.")
        return 130
    except PostInstallError as e:
        app_logger.error(str(e), exc_info=True)
        con.print_error(str(e))
        return 1
    except subprocess.CalledProcessError as e:
        app_logger.error(f"Command failed with exit code {e.returncode}: {e.cmd}", exc_info=True)
        con.print_error(f"Command failed with exit code {e.returncode}. See the log file for details.")
        return 1
    except FileNotFoundError as e:
        app_logger.error(f"Executable not found: {e}")
        con.print_error(f"Executable not found: {e.filename or e}")
        return 1
    except OSError as e:
        app_logger.error(f"I/O error: {e}", exc_info=True)
        con.print_error(f"I/O error: {e}")
        return 1

    app_logger.info(f"Completed modules: {', '.join(executed) or 'none'}")
    if options.dry_run:
        con.print_success(f"Dry run finished ({len(executed)} modules).")
    else:
        con.print_success(f"All done ({len(executed)} modules). Reboot to apply every change.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
