"""Liveness and readiness probes.

Usage
-----
Import the probe resource for route registration::

    from gitpulse.api.health.resources import ProbeResource
"""
