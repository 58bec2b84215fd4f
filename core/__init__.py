"""
core — Constants, structured logging, configuration and errors.

Shared by every other Conduit package; nothing here imports upward.
"""
