from .config import settings, get_settings
from .errors import ProfitLensError, ConfigurationError
from .logging import setup_logging

__all__ = ["settings", "get_settings", "ProfitLensError", "ConfigurationError", "setup_logging"]
