"""Gradio user interface for Impasto."""
