"""HookLog - webhook inbox and demo list backend."""

__version__ = "1.0.0"
