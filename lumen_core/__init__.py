"""Shared runtime for lumen-tools: configuration, logging, HTTP runtime."""
