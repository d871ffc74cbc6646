"""
Exports for renderers and other tools.
"""
