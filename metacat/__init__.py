"""metacat: application languages and schematron rules for a metadata catalog."""

__version__ = "0.1.0"
