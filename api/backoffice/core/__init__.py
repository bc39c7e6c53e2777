"""
Configuration, security and error handling for the Backoffice API.
"""
