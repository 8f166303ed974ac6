"""HTTP interface for tree-reconciler."""
