"""CowClassifier: batch cow body-conformation classification service."""

__version__ = "0.1.0"
