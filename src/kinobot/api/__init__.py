"""HTTP command endpoint."""
