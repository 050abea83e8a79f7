"""HTTP routes for the scheduled-task trigger and the dashboard API."""
