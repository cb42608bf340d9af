"""
ImageWatch API Package.

FastAPI REST and WebSocket API for code generation and image refresh.
Requires Python 3.11+.
"""

# Import app lazily to avoid circular imports
# Use: from api.main import app
