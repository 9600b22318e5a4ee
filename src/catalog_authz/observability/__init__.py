"""
catalog_authz.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for consistent log enrichment and decision context.
"""

# Package marker.
