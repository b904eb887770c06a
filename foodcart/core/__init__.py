"""Core helpers: configuration, pricing math, storage backends."""
