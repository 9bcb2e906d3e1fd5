"""
extensions — pluggable route bundles for the host router.

Provides a small capability interface that lets a self-contained unit of
route-handling logic attach itself to a FastAPI app or ``APIRouter``:
  • ``name`` — unique identifier
  • ``extend(router)`` — register routes, return the router
  • optional async ``startup`` / ``shutdown`` hooks

Each extension is a subclass of BaseExtension.
"""
