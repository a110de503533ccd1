# core/logger.py
import logging
from tripboard.core.config import settings

logger = logging.getLogger("tripboard")
logger.setLevel(settings.LOG_LEVEL.upper())

console_handler = logging.StreamHandler()
formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s")
console_handler.setFormatter(formatter)

logger.addHandler(console_handler)
