"""Core types shared by the drawio rendering pipeline."""
