"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent
DELETE_POLICIES = ("restrict", "cascade")


class Settings:
    ENV: str
    DATABASE_URL: str
    HOST: str
    PORT: int
    LOG_LEVEL: str
    SQL_ECHO: bool
    ALLOW_DEV_CORS: bool
    REFERENCE_DELETE_POLICY: str

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'blog.db'}").strip()
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = self._int_env("PORT", "3000")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.REFERENCE_DELETE_POLICY = os.getenv("REFERENCE_DELETE_POLICY", "restrict").lower()
        self._validate()

    @staticmethod
    def _int_env(name: str, default: str) -> int:
        raw = os.getenv(name, default)
        try:
            return int(raw)
        except ValueError:
            raise RuntimeError(f"{name} must be an integer, got {raw!r}")

    def _validate(self):
        if not self.DATABASE_URL:
            raise RuntimeError("DATABASE_URL must not be empty")
        if not 0 < self.PORT < 65536:
            raise RuntimeError(f"PORT out of range: {self.PORT}")
        if self.REFERENCE_DELETE_POLICY not in DELETE_POLICIES:
            raise RuntimeError(
                f"REFERENCE_DELETE_POLICY must be one of {', '.join(DELETE_POLICIES)}"
            )


settings = Settings()
