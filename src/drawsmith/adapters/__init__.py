"""Adapters talking to drawio, the display stack and document hosts."""
