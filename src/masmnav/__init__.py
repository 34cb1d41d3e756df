"""masmnav - go-to-definition and hover for Miden assembly."""

__version__ = "0.1.0"
