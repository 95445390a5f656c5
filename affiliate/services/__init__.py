"""
Services package.

Business logic layer on top of the repositories.
"""
