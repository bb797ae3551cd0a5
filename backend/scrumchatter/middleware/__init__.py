# Middleware package init
"""
Scrum Chatter Backend: Middleware Package
==========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Request ID runs first so the access log line and every log line written
    while handling the request share the same correlation id.
"""
