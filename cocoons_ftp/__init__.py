"""cocoons-ftp: deploy a generated static site to a server over FTP."""

__version__ = "1.0.0"
