import logging
from typing import Any, Dict, Optional

from tortoise import Tortoise

from .settings import settings

logger = logging.getLogger(__name__)

MODEL_MODULES = ["authgate.models.user"]


def get_tortoise_config(db_url: Optional[str] = None) -> Dict[str, Any]:
    return {
        "connections": {"default": db_url or settings.DATABASE_URL},
        "apps": {
            "models": {
                "models": [*MODEL_MODULES, "aerich.models"],
                "default_connection": "default",
            }
        },
        "use_tz": True,
        "timezone": "UTC",
    }


# Read by aerich (see [tool.aerich] in pyproject.toml).
TORTOISE_ORM_CONFIG = get_tortoise_config()


async def init_db(generate_schemas: bool = False) -> None:
    """Open the credential store; optionally create missing tables."""
    logger.info("Initializing database connection")
    await Tortoise.init(config=TORTOISE_ORM_CONFIG)

    if generate_schemas:
        logger.info("Generating database schemas")
        await Tortoise.generate_schemas(safe=True)


async def close_db_connection() -> None:
    logger.info("Closing database connection")
    await Tortoise.close_connections()
