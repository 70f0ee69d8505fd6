"""HTTP presentation layer for module selection."""
