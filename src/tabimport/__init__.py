"""Schema-driven import of CSV and spreadsheet files into typed records."""

__version__ = "0.1.0"
