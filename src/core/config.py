"""
Configuration module for graph-dbdriver.

Uses pydantic-settings for environment-based configuration of the graph
backend connection and the executor's timeouts.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The dialect tag selects backend-specific behavior:
    - neo4j: sessions are bound to graph_database when set
    - memgraph: graph_database is ignored
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===========================================
    # GRAPH BACKEND CONNECTION
    # ===========================================
    graph_mode: Literal["neo4j", "memgraph"] = Field(
        default="neo4j",
        description="Backend dialect sharing the Bolt protocol",
    )
    graph_host: str = Field(default="localhost", description="Backend host")
    graph_port: int = Field(default=7687, description="Bolt port")
    graph_user: str = Field(default="neo4j", description="Backend username")
    graph_password: str = Field(
        default="devpassword",
        description="Backend password",
    )
    graph_database: str | None = Field(
        default=None,
        description="Neo4j database name (server default when unset)",
    )

    # ===========================================
    # EXECUTOR TIMEOUTS
    # ===========================================
    read_tx_timeout_seconds: int = Field(
        default=30,
        gt=0,
        description="Default timeout for managed reads",
    )
    single_tx_timeout_seconds: int = Field(
        default=30,
        gt=0,
        description="Fixed timeout for single-statement reads and writes",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
