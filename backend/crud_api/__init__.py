"""
CRUD API: generated REST backend with registry-driven cascading deletes.
"""
