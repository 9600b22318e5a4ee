"""
catalog_authz.resources

Resolved catalog entities and their policy-engine encoding.

Responsibilities:
- Model resolved entity paths handed over by the metadata resolver.
- Encode paths into root-first parent chains for decision documents.
"""

# Package marker.
