"""Configuration objects for rabbitmq-operator."""

from dataclasses import dataclass


@dataclass
class ReadConfig:
    """Configuration for reading objects from disk."""

    default_namespace: str | None = None
    """Namespace assigned to objects that do not declare one."""
