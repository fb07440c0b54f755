"""Command line interface for the legacy HTML cleaner."""
