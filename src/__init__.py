"""Robust NuGet Restore — retrying `nuget restore` wrapper for CI builds."""

__version__ = "0.1.0"
