"""
Backoffice post-action response shell.
"""
