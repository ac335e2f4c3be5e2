"""alertchart: event and alert time series for network dashboards."""

__version__ = "0.1.0"
