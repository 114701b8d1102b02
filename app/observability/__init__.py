"""Request instrumentation and process-level error capture.

Everything here logs through structlog: one access record per request, one
error record per fatal error escaping the request scopes.
"""
