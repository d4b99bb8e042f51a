"""Edge router serving per-project static asset bundles."""
