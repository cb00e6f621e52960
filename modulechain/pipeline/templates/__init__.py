"""Jinja2 templates for generated worker and driver scripts."""
