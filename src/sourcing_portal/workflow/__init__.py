"""
sourcing_portal.workflow

Pure status rules for sourcing requests and proposals.

Responsibilities:
- Proposal status state machine (`transitions`).
- Request open/closed lifecycle derived from the deadline (`lifecycle`).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package touches the database or the request context; the service
# layer applies these rules and persists the outcome.
