"""HTTP host adapter for the Famand engine."""
