"""Stock price threshold alerts: periodic price checks and email notifications."""

__version__ = "0.1.0"
