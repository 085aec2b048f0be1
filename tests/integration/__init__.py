"""
Integration tests against a live PostgreSQL database (TEST_DATABASE_URL)
"""
