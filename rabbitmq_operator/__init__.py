"""
rabbitmq_operator renders the server configuration for a RabbitmqCluster and
evaluates the availability condition reported in its status.
"""

__all__ = [
    "manifest",
    "resource",
    "status",
    "exceptions",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
