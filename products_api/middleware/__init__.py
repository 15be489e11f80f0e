"""
Products API - Middleware Package
=================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Logging] → [Origin Guard] → [CORS] → Route Handler

    1. Logging wraps everything so rejected requests are logged too
    2. Origin Guard answers 403 for browser origins outside the allowlist
    3. CORS (Starlette's CORSMiddleware) adds headers / answers preflights
       for the origins that got through
"""
