"""
Book Service test suite
"""
