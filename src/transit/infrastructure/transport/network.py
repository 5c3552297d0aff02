"""Base network transport (requests' pooled HTTPAdapter)."""

from __future__ import annotations

import logging
from typing import Optional

from requests.adapters import HTTPAdapter

from transit.domain.config.pool import PoolConfig

logger = logging.getLogger(__name__)


def create_base_transport(pool: Optional[PoolConfig] = None) -> HTTPAdapter:
    """Create the pooled adapter that performs the network I/O.

    urllib3-level retries are disabled: retrying is the retry layer's job and
    must stay visible to the chain.
    """
    if pool is None:
        pool = PoolConfig()
    logger.debug(
        f"Creating base transport (pools={pool.pool_connections}, "
        f"maxsize={pool.pool_maxsize}, block={pool.pool_block})"
    )
    return HTTPAdapter(
        pool_connections=pool.pool_connections,
        pool_maxsize=pool.pool_maxsize,
        max_retries=0,
        pool_block=pool.pool_block,
    )
