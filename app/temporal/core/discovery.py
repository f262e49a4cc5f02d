"""Discovery utility for Temporal workflows and activities."""

import importlib
import pkgutil

from app.utils.logging import get_logger

logger = get_logger(__name__)

COMPONENT_PACKAGES = ("app.temporal.revision",)


def discover_all(packages=COMPONENT_PACKAGES) -> None:
    """Import every module under ``packages`` so their decorators register."""
    for package_name in packages:
        package = importlib.import_module(package_name)
        for _, mod_name, _ in pkgutil.walk_packages(package.__path__, f"{package_name}."):
            importlib.import_module(mod_name)
            logger.debug(f"Imported Temporal component module: {mod_name}")
    logger.info("All Temporal workflows and activities discovered and registered successfully")
