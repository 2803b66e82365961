"""Route Metadata Registry."""
