"""
FastAPI routers grouped by resource (productos, pago, info).

Each module exposes an APIRouter included by api.app.create_app. Handlers
reach the CatalogService through request.app.state.
"""
