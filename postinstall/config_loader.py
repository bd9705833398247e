# fedora-postinstall/postinstall/config_loader.py

import json
from pathlib import Path
from typing import Any, Dict, Union

from postinstall import console_output as con
from postinstall.logger_utils import app_logger

def load_configuration(config_file: Union[str, Path]) -> Dict[str, Any]:
    """Loads the package catalog from the given JSON file. Returns {} on any error."""
    config_path = Path(config_file)
    if not config_path.is_file():
        con.print_error(f"Configuration file '{config_path}' not found.")
        app_logger.error(f"Configuration file '{config_path}' not found.")
        return {}

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        con.print_error(f"Error loading configuration file '{config_path}': {e}")
        app_logger.error(f"Error loading configuration file '{config_path}': {e}", exc_info=True)
        return {}

    if not isinstance(data, dict):
        con.print_error(f"Configuration file '{config_path}' must contain a JSON object at the top level.")
        app_logger.error(f"Top-level JSON in '{config_path}' is {type(data).__name__}, expected object.")
        return {}

    app_logger.info(f"Loaded configuration from '{config_path}' ({len(data)} sections).")
    return data

def get_phase_data(config: Dict[str, Any], module_name: str) -> Dict[str, Any]:
    """Returns the configuration section for one module, or {} if it has none."""
    section = config.get(module_name, {})
    if not isinstance(section, dict):
        app_logger.warning(f"Configuration section '{module_name}' is not an object, ignoring it.")
        return {}
    return section
