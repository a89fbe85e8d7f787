"""Liveness and readiness probes.

Usage
-----
Import the probe resource for route registration::

    from issuepress.api.health.resources import ProbeResource
"""
