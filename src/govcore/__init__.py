"""govcore: approval workflow and risk scoring rules for municipal governance items."""

__version__ = "0.1.0"
