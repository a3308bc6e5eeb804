"""Provider telemetry."""
