import os
import tempfile
import dotenv


dotenv.load_dotenv()


# Defaults
VERBOSE = False
LOG_PATH = ""
LOG_LEVEL = "INFO"
LOG_ROTATION = "1 week"
LOG_RETENTION = "1 month"


class Config:
    VERBOSE = os.getenv("MAGNETURI_VERBOSE", str(VERBOSE)).lower() == "true"

    # Empty path disables the file sink
    LOG_PATH = os.getenv("MAGNETURI_LOG_PATH", LOG_PATH)
    LOG_LEVEL = os.getenv("MAGNETURI_LOG_LEVEL", LOG_LEVEL)
    LOG_ROTATION = os.getenv("MAGNETURI_LOG_ROTATION", LOG_ROTATION)
    LOG_RETENTION = os.getenv("MAGNETURI_LOG_RETENTION", LOG_RETENTION)


class TestConfig:
    VERBOSE = True

    LOG_PATH = tempfile.NamedTemporaryFile().name
    LOG_LEVEL = "DEBUG"
