"""FTP operations module for cocoons-ftp.

This module handles all FTP-related functionality:
- FTPSession: Connection management and primitive remote operations
- RemoteCleaner: Recursive deletion of a remote tree
- RemoteUploader: Recursive upload of a local tree
- Exceptions: FTP-specific error types
"""
