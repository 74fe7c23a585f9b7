"""Repository activity endpoints.

Usage
-----
Import the resource for route registration::

    from gitpulse.api.activity.resources import RepositoryActivityResource
"""
