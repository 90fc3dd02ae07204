"""Route modules for the MSGA API."""
from . import account, auth, reports, users, version, webhooks

__all__ = ["account", "auth", "reports", "users", "version", "webhooks"]
