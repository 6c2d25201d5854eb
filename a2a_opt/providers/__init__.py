"""Provider framework and OPT store providers."""
