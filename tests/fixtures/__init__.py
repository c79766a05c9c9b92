"""Test fixtures: ADF document builders and sample API payloads."""
