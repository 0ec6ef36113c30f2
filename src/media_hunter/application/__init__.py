"""
Application layer - search use cases built on domain entities.
"""
