"""Project configuration: discovery, settings, logging, and the config store."""
