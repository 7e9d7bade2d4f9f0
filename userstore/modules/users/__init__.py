"""
User Module

User record management with clear separation of concerns:
- domain: User model and validation rules
- repositories: Table access
- services: Business logic and status mapping
- api: REST API endpoints
"""
