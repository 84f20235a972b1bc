"""
Schemas module - Request/Response schemas for API endpoints.

Tables (db/tables.py) describe what is stored; schemas describe the API
contract (what clients send and receive).
"""
