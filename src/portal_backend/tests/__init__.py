"""
Test package for portal_backend.
"""
