"""
Domain layer - provider-agnostic media search entities.
"""
