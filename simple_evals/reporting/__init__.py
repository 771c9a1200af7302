"""Storage and reporting of evaluated scenario runs."""
