"""
sourcing_portal.api.routers

HTTP route modules, one per resource.
"""

# Package marker.
