"""DBChat - ask a relational database questions in plain language."""

__version__ = "0.1.0"
