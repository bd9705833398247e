# fedora-postinstall/postinstall/flags.py

from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from postinstall import console_output as con
from postinstall.config import MODULE_DEFAULTS
from postinstall.logger_utils import app_logger

DISABLE_PREFIX = "--no-"
ENABLE_PREFIX = "--"


def resolve_flags(
    tokens: Iterable[str],
    defaults: Mapping[str, bool] = MODULE_DEFAULTS,
    warn: Optional[Callable[[str], None]] = None
) -> Mapping[str, bool]:
    """
    Turns '--no-<module>' / '--<module>' tokens into a read-only module -> enabled mapping.

    Module names are matched exactly (case-sensitive). Anything else, including a
    misspelled module name, is reported through `warn` and otherwise ignored.
    Later tokens win over earlier ones.
    """
    _warn = warn or con.print_warning
    flags = dict(defaults)

    for token in tokens:
        if token.startswith(DISABLE_PREFIX):
            name, value = token[len(DISABLE_PREFIX):], False
        elif token.startswith(ENABLE_PREFIX):
            name, value = token[len(ENABLE_PREFIX):], True
        else:
            name, value = None, None

        if name in flags:
            flags[name] = value
            app_logger.info(f"Module '{name}' {'enabled' if value else 'disabled'} by '{token}'.")
        else:
            app_logger.warning(f"Unknown flag ignored: {token}")
            _warn(f"Unknown flag: {token}")

    return MappingProxyType(flags)
