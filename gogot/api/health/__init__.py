"""Health probe resources.

Usage
-----
Import health resources for route registration::

    from gogot.api.health.resources import HealthResource, ReadyResource
"""
