"""Core configuration, logging, monitoring and database layer for appdb."""
