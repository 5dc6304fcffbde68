"""Command line entry point for resolving module versions outside a test run."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .common.logging_utils import configure_logging
from .config import HelperConfig
from .constants import ExitCodes
from .errors import ModuleInstallHelperError, RegistryQueryFailed
from .metadata import find_module_root, forge_module_name, read_module_metadata
from .registry.forge import ForgeClient
from .versioning.resolver import module_version_from_requirement

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="module-install-helper",
        description="Resolve Puppet module versions against the forge",
    )
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--config",
                        dest="CONFIG",
                        help="YAML file with forge_host/forge_api/request_timeout",
                        action="store",
                        type=str)

    sub = parser.add_subparsers(dest="command", required=True)

    resolve = sub.add_parser("resolve", help="Print the newest release matching a requirement")
    resolve.add_argument("module", help="Module name, e.g. puppetlabs-stdlib")
    resolve.add_argument("requirement", help="Requirement, e.g. '>= 4.13.1 <= 4.14.0'")

    deps = sub.add_parser("deps", help="Print resolved dependencies from metadata.json")
    deps.add_argument("-d", "--dir",
                      dest="DIRECTORY",
                      help="Directory to search upward from (default: current directory)",
                      default=os.getcwd())

    return parser.parse_args(argv)


def _resolve(client: ForgeClient, args: argparse.Namespace) -> None:
    module_name = forge_module_name(args.module)
    print(module_version_from_requirement(client, module_name, args.requirement))


def _deps(client: ForgeClient, args: argparse.Namespace) -> None:
    root = find_module_root(args.DIRECTORY)
    metadata = read_module_metadata(root)
    for declared in metadata.dependencies:
        name = forge_module_name(declared.name)
        version = "latest"
        if declared.version_requirement is not None:
            version = module_version_from_requirement(client, name, declared.version_requirement)
        print(f"{name} {version}")


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line and return its exit code."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL)
    config = HelperConfig.from_env(config_file=args.CONFIG)
    client = ForgeClient(config)

    handlers = {"resolve": _resolve, "deps": _deps}
    try:
        handlers[args.command](client, args)
    except RegistryQueryFailed as exc:
        logger.error("%s", exc)
        return ExitCodes.CONNECTION_ERROR.value
    except ModuleInstallHelperError as exc:
        logger.error("%s", exc)
        return ExitCodes.RESOLUTION_ERROR.value
    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
