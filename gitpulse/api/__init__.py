"""gitpulse HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application exposing repository activity over HTTP.

Usage
-----
Create the application::

    from gitpulse.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # with activity endpoints
"""

from gitpulse.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
