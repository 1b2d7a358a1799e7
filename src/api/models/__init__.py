"""
Pydantic models for API request/response schemas.

These models define the JSON shapes exchanged with callers. They are kept
separate from the relay's internal dataclasses so the wire format can use
the camelCase names existing clients expect.
"""
