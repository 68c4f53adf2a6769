"""
Description: 
This module sets up a rate limiter for the application using SlowAPI.
It initializes a Limiter instance with a key function to identify clients by their IP address and sets default limits for requests.
Set RATE_LIMIT_ENABLED=false to switch limiting off (the test suite does).

Dependencies:
- slowapi: For rate limiting functionality.
- slowapi.util: For utility functions like get_remote_address to retrieve the client's IP address.
- loguru: For logging information about the rate limiter initialization.
"""
import os
from slowapi import Limiter
from slowapi.util import get_remote_address
from loguru import logger

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["60/minute"],
    enabled=os.getenv("RATE_LIMIT_ENABLED", "true").lower() != "false",
)
logger.info("Rate limiter initialized")
