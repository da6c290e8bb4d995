"""sqllint command-line interface."""
