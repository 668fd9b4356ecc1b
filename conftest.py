"""
Ensures the project root is importable when running the test suite from a checkout.
"""
