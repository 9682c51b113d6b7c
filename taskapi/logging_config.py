import logging
import os
from logging.handlers import RotatingFileHandler

from taskapi.config import get_settings

settings = get_settings()
os.makedirs(settings.log_dir, exist_ok=True)

formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def _file_handler(name: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        os.path.join(settings.log_dir, name), maxBytes=10*1024*1024, backupCount=5
    )
    handler.setFormatter(formatter)
    return handler


access_logger = logging.getLogger("uvicorn.access")
access_logger.setLevel(logging.INFO)
access_logger.addHandler(_file_handler("access.log"))
access_logger.propagate = False

error_logger = logging.getLogger("uvicorn.error")
error_logger.setLevel(logging.ERROR)
error_logger.addHandler(_file_handler("error.log"))
error_logger.propagate = False

app_logger = logging.getLogger("taskapi")
app_logger.setLevel(settings.log_level)
app_logger.addHandler(_file_handler("app.log"))
stream_handler = logging.StreamHandler()
stream_handler.setFormatter(formatter)
app_logger.addHandler(stream_handler)
app_logger.propagate = False
