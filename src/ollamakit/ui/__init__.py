"""Terminal rendering for the ollamakit CLI."""
