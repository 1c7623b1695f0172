"""HTTP layer: routers, interceptors, middleware and error handlers."""
