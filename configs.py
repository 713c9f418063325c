import os
from dotenv import load_dotenv
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

load_dotenv()

db = SQLAlchemy()
login = LoginManager()


def _env_flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///stock_status.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", 10))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # OUT / LOW / NORMAL column on the stock status page
    STOCK_STATUS_CLASSIFY = _env_flag("STOCK_STATUS_CLASSIFY")


def engine_options(database_uri: str, pool_timeout: int) -> dict:
    opts = {"pool_pre_ping": True}
    # sqlite has no QueuePool to wait on
    if not (database_uri or "").startswith("sqlite"):
        opts["pool_timeout"] = pool_timeout
    return opts
