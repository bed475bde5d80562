"""Report formatting and export."""
