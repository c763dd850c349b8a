"""Configuration module for cocoons-ftp.

This module handles site configuration and credentials:
- ConfigLoader: cocoons.json loading and validation
- CredentialManager: Password lookup via keyring
- Paths: Path constants and discovery
- SiteConfig / FTPSettings: Configuration dataclasses
"""
