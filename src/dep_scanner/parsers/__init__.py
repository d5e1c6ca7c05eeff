"""Parsers for MSBuild props files and NuGet version strings."""
