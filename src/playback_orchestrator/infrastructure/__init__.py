"""Infrastructure layer - queue snapshot storage backends."""
