"""
Restaurant data owned by the web layer.

Responsibilities:
- Request/response schemas for restaurants, conversations, messages and
  saved recommendations.
- An in-process store for those records, keyed by sequential ids.
"""
