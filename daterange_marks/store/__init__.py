"""
Range storage module.

Owns range records and the derived date and mark key indices.
"""
