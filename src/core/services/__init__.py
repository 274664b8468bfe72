"""Servicios puros: unscrambling, paginación y orden de episodios."""
