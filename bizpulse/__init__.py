"""BizPulse - per-user business dashboard analytics service."""

__version__ = "0.1.0"
