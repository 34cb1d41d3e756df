"""masmnav command-line interface."""
