"""Python-Markdown extensions hosting diagram engines."""
