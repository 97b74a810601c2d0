"""Board state, rules and the command engine."""
