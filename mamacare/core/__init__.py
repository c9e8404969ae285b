"""
Core building blocks for the MamaCare reminder engine.
"""
