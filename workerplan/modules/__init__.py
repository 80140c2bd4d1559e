"""
Node planning modules.
"""
