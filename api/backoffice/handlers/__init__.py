"""
Built-in handlers registered at startup.
"""
