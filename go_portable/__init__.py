"""Check that Go packages build or vet cleanly on every supported platform."""

__version__ = "0.1.0"
