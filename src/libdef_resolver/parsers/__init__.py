"""Parsers for directory names, version ranges and package manifests."""
