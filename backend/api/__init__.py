"""HTTP layer: dependencies, helpers and route modules."""
