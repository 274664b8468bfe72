"""Core: dominio, configuración, errores y servicios puros (sin I/O)."""
