"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the command line.

    Args:
        Enum (int): Exit codes for the command line.
    """

    SUCCESS = 0
    RESOLUTION_ERROR = 1
    CONNECTION_ERROR = 2


class DependencyType(Enum):
    """Installable dependency kinds understood by the planner.

    Args:
        Enum (string): Dependency kinds.
    """

    PACKAGE = "package"


class FactOperator(Enum):
    """Operators accepted in a fact constraint."""

    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    IN = "in"
    NOT_IN = "not_in"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration defaults; not intended to provide behavior.
    """

    FORGE_HOST_DEFAULT = "https://forge.puppet.com/"
    FORGE_API_DEFAULT = "https://forgeapi.puppetlabs.com/"
    FORGE_MODULES_PATH = "v3/modules/"
    METADATA_FILE = "metadata.json"
    CALLER_PATTERN = r"spec_helper_acceptance|_spec|^conftest\.py$|^test_\w*\.py$"

    ENV_FORGE_HOST = "BEAKER_FORGE_HOST"
    ENV_FORGE_API = "BEAKER_FORGE_API"
    ENV_CONFIG_FILE = "BEAKER_MODULE_INSTALL_CONFIG"
    ENV_TIMEOUT = "BEAKER_MODULE_INSTALL_TIMEOUT"
    ENV_LOG_LEVEL = "BEAKER_MODULE_INSTALL_LOG_LEVEL"

    SUPPORTED_DEPENDENCY_TYPES = [DependencyType.PACKAGE.value]
    LIST_OPERATORS = [FactOperator.IN.value, FactOperator.NOT_IN.value]
    SCALAR_OPERATORS = [FactOperator.EQUAL.value, FactOperator.NOT_EQUAL.value]

    MASTER_ROLE = "master"
    AGENT_ROLE = "agent"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    USER_AGENT = "beaker-module-install-helper/1.0"
