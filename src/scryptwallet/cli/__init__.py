"""Command-line interface: interactive input, report and secret sink."""
