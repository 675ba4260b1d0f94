"""Manual trigger resource for running a tick on demand."""
