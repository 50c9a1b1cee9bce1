"""Digital twin sample providers and consumers, simulated vehicle signals and settings loaders."""

__version__ = "0.1.0"