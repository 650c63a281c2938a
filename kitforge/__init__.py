"""kitforge -- React project scaffolding service and npm registry proxy."""

__version__ = "0.1.0"
