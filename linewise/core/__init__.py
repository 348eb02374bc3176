"""Core runtime pieces: configuration, providers and terminal output."""
