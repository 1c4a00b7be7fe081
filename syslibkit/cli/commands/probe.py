"""
Probe command implementation.

Runs the enabled system probes only. Nothing is cloned or built.
"""

import logging

from syslibkit.cli.utils import build_capabilities, build_config, format_link_info
from syslibkit.core.exceptions import ConfigError
from syslibkit.engine import ResolutionEngine

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the probe command.

    Returns:
        Exit code (0 if a system library was found, 1 otherwise)
    """
    try:
        capabilities = build_capabilities(args)
        config = build_config(args)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    info = ResolutionEngine(capabilities).probe_system(config)
    if info is None:
        logger.error(f"No system library found for {config.library or config.name}")
        return 1

    print(format_link_info(info, args.format))
    return 0
