"""HTTP adapter translating requests into repository calls."""
