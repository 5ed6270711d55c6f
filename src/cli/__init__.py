"""CLI `ga-report`."""
