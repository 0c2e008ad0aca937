"""Version 1 API routers."""
