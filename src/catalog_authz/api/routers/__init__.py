"""
catalog_authz.api.routers

Router modules mounted by `catalog_authz.api.app.create_app`.
"""

# Package marker.
