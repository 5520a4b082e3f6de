"""HTTP layer: Starlette routes, middleware and the application factory."""
