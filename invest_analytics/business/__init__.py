"""Business layer: configuration, analytics service and command line."""
