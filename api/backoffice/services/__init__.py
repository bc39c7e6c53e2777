"""
Collaborator services: routing, templating, localization, events, handlers.
"""
