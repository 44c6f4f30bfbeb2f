"""
Environment-aware configuration.
Values come from the environment (and a .env file if present); the catalog
core itself never reads the environment, create_app passes these through.
"""
import os
from dotenv import load_dotenv

load_dotenv()  # Read .env if present


class BaseConfig:
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    # Storage engine: "file" (JSON per collection) or "db" (SQLAlchemy)
    STORAGE_TYPE = os.getenv("STORAGE_TYPE", "file").lower()
    DATA_DIR = os.getenv("DATA_DIR", "data")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///catalog.db")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()


class TestingConfig(BaseConfig):
    TESTING = True
    # Tests override these with a tmp_path or an in-memory database
    STORAGE_TYPE = "db"
    DATABASE_URL = "sqlite://"


class ProductionConfig(BaseConfig):
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
