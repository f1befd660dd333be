"""lumen-tools application: remote jobs, media clients and tools."""
