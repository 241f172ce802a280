"""
API Module
---------
HTTP endpoints for reverse postal code lookup using FastAPI.
Features include:
- Nearest postal codes for a single latitude/longitude
- Batch lookup for many points
- Readiness reporting while the index is being built
"""
