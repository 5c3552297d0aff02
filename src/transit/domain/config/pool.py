"""Connection pool configuration model."""

from pydantic import BaseModel, Field


class PoolConfig(BaseModel):
    """Configuration for the base transport's connection pools.

    Attributes:
        pool_connections: Number of host pools to cache
        pool_maxsize: Maximum connections kept per pool
        pool_block: Block when a pool is exhausted instead of opening extra connections
    """

    pool_connections: int = Field(10, gt=0)
    pool_maxsize: int = Field(100, gt=0)
    pool_block: bool = False
