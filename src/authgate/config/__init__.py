from .database import close_db_connection, get_tortoise_config, init_db
from .rate_limit import credential_rate_limit_dependency, rate_limit, rate_limit_dependency
from .settings import Settings, get_settings, settings

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "rate_limit",
    "rate_limit_dependency",
    "credential_rate_limit_dependency",
    "init_db",
    "close_db_connection",
    "get_tortoise_config",
]
