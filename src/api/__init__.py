"""
FastAPI application layer for the pool relay.

This module exposes the registry, aggregation, lookup and control-forwarding
operations over HTTP so pool frontends can talk to many backends through a
single endpoint.
"""
