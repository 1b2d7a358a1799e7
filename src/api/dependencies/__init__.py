"""
FastAPI dependencies for request processing.

Dependencies hand the app-owned registry, backend client and pipeline
objects to endpoints, so handlers never reach for module globals.
"""
