"""
Schemas module - Request/Response schemas for API endpoints.

Schemas are the API contract (what client sends/receives). Services work
on plain dict rows; routes convert them with ResourceResponse.from_row etc.
"""
