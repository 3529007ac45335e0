"""API Layer — FastAPI routers, dependency wiring and global error handlers."""
