"""gogot HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that answers Go vanity import requests.

Public API
----------
AppDependencies
    Collaborators the application is built from.
create_app
    Application factory registering the health routes, the import path
    sink, the access-log middleware and the failure handlers.
"""

from gogot.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
