"""PokeAPI proxy with normalized lookups and persisted Pokemon teams."""
