"""Form approval and cancellation workflow for ERP business transactions."""

__version__ = "0.3.0"
