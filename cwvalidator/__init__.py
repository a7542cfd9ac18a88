"""Configuration, queries, statistics and checks for CloudWatch agent test runs."""

__version__ = "0.1.0"
__all__ = ["basic", "cloudwatch", "config", "performance", "stats", "stress"]