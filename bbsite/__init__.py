"""Application package root.

Editorial web application for a collaborative bibliographic database:
entity create/edit wizards, revision history and editor statistics.
Build the Flask app with ``bbsite.startup.create_app``.
"""

__all__ = [
]
