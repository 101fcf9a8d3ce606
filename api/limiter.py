"""
api/limiter.py -- Shared slowapi rate limiter instance.

Import this in api/main.py (to mount as middleware) and api/routes/users.py
(to apply per-route limits with @limiter.limit()).

A single shared instance means all routes share the same in-memory counter
store. Per-module instances would each get an isolated counter and the
limits would never trigger.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")
