"""
Per-invocation function setup.

Loads a local .env when present, configures logging and checks that the
settings a function needs are set.

Dependencies: python-dotenv, backend.configs, backend.observability
System role: Lambda cold-start initialisation
"""

from dotenv import load_dotenv

from backend.configs import Settings, get_settings
from backend.observability.logger import configure_logging

# Load environment variables from .env if present
load_dotenv()


def init_function(*required: str) -> Settings:
    """
    Prepare a function invocation.

    Args:
        *required: Dotted setting paths that must be non-empty

    Returns:
        Settings: Application settings

    Raises:
        ConfigurationError: A required setting is empty
    """
    settings = get_settings()
    configure_logging("DEBUG" if settings.debug else settings.log_level)
    settings.require(*required)
    return settings
