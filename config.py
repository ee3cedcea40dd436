import os


class Config:
    HOST = os.environ.get("RECEIPT_POINTS_HOST", "0.0.0.0")
    PORT = int(os.environ.get("RECEIPT_POINTS_PORT", "8080"))
    LOG_LEVEL = os.environ.get("RECEIPT_POINTS_LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class TestingConfig(Config):
    DEBUG = True
    TESTING = True
