"""
API route handlers for different endpoint groups.

Pool registration and lookups, control forwarding and health checks each
live in their own router.
"""
