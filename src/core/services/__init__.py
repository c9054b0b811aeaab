"""Services that compose the domain into deployment operations."""
