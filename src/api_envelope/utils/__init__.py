"""
Utilities: sensitive-data masking and client address resolution
"""
