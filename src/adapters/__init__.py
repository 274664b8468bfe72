"""Adaptadores de I/O: HTTP, fuentes por sitio y exportación."""
