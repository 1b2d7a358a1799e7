"""
Backend registry and outbound HTTP access for the pool relay.

The relay keeps a process-local list of pool-control backends and talks to
them over HTTP; the pipeline modules build on top of these pieces.
"""
