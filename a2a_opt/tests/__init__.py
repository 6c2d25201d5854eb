"""
Test suite for the A2A OPT extension.

Covers every component of the package:
- Core (errors, base models, settings)
- Hierarchy records and status transitions
- Provider framework and the in-memory store
- RPC dispatch
- Extension helpers and the HTTP binding
"""

import logging

# Configure test logging
logging.basicConfig(level=logging.WARNING)  # Reduce noise during tests
