"""minibundle CLI commands - Subcommand implementations."""
