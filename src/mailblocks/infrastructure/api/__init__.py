"""HTTP boundary: FastAPI application, routes and schemas."""
