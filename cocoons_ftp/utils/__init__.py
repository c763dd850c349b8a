"""Utility module for cocoons-ftp.

This module provides cross-cutting utilities:
- Logging: Configured logging with PII redaction
- Validators: Input validation for host, port, timeout and folders
"""
