"""
Resolve command implementation.

Finds a system library or builds it from source and prints the link
information on stdout.
"""

import logging

from syslibkit.cli.utils import build_capabilities, build_config, format_link_info
from syslibkit.core.exceptions import ConfigError, ResolutionError
from syslibkit.engine import ResolutionEngine

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 on configuration or resolution errors)
    """
    logger.debug(f"Arguments: {args}")

    try:
        capabilities = build_capabilities(args)
        config = build_config(args)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    try:
        info = ResolutionEngine(capabilities).build(config)
    except ResolutionError as e:
        logger.error(str(e))
        return 1

    print(format_link_info(info, args.format))
    return 0
