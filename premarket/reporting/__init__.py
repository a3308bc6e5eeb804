"""Section parsing and document rendering."""
