import os, sys, logging
from loguru import logger

LOG_LEVEL = os.getenv("CHUNKLAB_LOG_LEVEL", "INFO").upper()

# Pretty console handler
logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level=LOG_LEVEL
)

# Redirect standard library logging to Loguru
class PropagateHandler(logging.Handler):
    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())

def setup_library_interception(names=("requests", "urllib3")):
    # HTTP client chatter from the embedding and chat providers
    for name in names:
        l = logging.getLogger(name)
        l.handlers = [PropagateHandler()]
        l.propagate = False

setup_library_interception()
