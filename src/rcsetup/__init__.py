"""Install and uninstall the ruscompile toolchain."""

__version__ = "0.1.0"
