"""Workflow services. These are the only code paths that change marketplace state."""
