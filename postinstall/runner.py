# fedora-postinstall/postinstall/runner.py

from typing import Any, Dict, List, Optional

from postinstall import console_output as con
from postinstall.logger_utils import app_logger
from postinstall.phases import PHASES


def run_phases(ctx, phases: Optional[Dict[str, Dict[str, Any]]] = None) -> List[str]:
    """
    Runs every enabled phase in registry order and returns the names that ran.
    The first failure propagates; later phases do not run.
    """
    phases = PHASES if phases is None else phases
    executed = []
    for module, info in phases.items():
        if not ctx.enabled(module):
            app_logger.info(f"Module '{module}' is disabled, skipped.")
            continue
        con.print_step(info["name"])
        app_logger.info(f"Starting module '{module}'.")
        info["handler"](ctx)
        app_logger.info(f"Module '{module}' completed.")
        executed.append(module)
    return executed
