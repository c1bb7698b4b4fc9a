"""
Services module - business logic behind the routes.

- record_store: keyed document collections (MongoDB)
- identity_service: credentials and session revocation (PostgreSQL)
- access: A1/A2 capability checks
- signup_service, bulk_import, management_service: the console operations
"""
