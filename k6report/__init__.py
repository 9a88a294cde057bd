"""Summarize k6 JSON event logs."""
