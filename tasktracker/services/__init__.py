"""Services module.

Services:
- security.py: Password hashing and token issuance/verification
- users.py: User lookup and creation
- tasks.py: Owner-scoped task CRUD
"""
