# ordercache/core/config.py
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    全局应用配置（环境变量前缀 ORDERCACHE_，也可写在 .env 中）。

    库内代码不直接读取 get_settings()，而是由组装入口显式传入。
    """

    # 运行环境
    ENV: str = Field(default="dev")

    # 数据库：本地缓存默认 sqlite，也可指向 PostgreSQL
    DATABASE_URL: str = Field(
        default="sqlite:///./ordercache.db",
        description="SQLAlchemy 连接串，例如：sqlite:///./ordercache.db 或 postgresql+psycopg://u:p@host/db",
    )
    SQL_ECHO: bool = Field(default=False)

    # 日志
    LOG_LEVEL: str = Field(default="INFO")

    # 同步分页
    SYNC_PAGE_SIZE: int = Field(default=25, ge=1)
    FIRST_PAGE_NUMBER: int = Field(default=1, ge=0)
    SYNC_MAX_PAGES: int = Field(default=200, ge=1)

    model_config = SettingsConfigDict(env_prefix="ORDERCACHE_", env_file=".env", extra="ignore")

    @field_validator("DATABASE_URL")
    @classmethod
    def _strip_quotes(cls, v: str) -> str:
        # 有些环境会把值写成 '"sqlite:///x.db"'，这里统一剥掉两侧引号
        s = v.strip()
        if (s.startswith('"') and s.endswith('"')) or (s.startswith("'") and s.endswith("'")):
            s = s[1:-1].strip()
        return s


@lru_cache
def get_settings() -> AppSettings:
    """全局单例设置入口（仅供组装入口使用）。"""
    return AppSettings()
