"""HTTP API for the interactive canvas."""
