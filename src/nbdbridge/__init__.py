"""Supervise nbdkit and nbd-client to expose a storage backend as an NBD device."""

__version__ = "0.3.0"
