"""
Core dependencies module.
"""
