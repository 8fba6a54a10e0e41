"""TicketDesk - Streamlit front end for the ticketing/task-management backend.

This package provides:
- A REST client for the backend (``ticketdesk.api``)
- The session/actor context injected into page controllers
- The reports store/controller and its presentation helpers
"""

__version__ = "0.1.0"
