"""Schedule state, grid geometry and normalization."""
