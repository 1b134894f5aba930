"""Flags understood by the s3backer nbdkit plugin."""

from enum import Enum


class FlagKind(Enum):
    BOOLEAN = "boolean"
    VALUED = "valued"


_BOOLEAN_FLAGS = (
    "blockCacheNoVerify",
    "blockCacheRecoverDirtyBlocks",
    "blockCacheSync",
    "blockHashPrefix",
    "debug",
    "debug-http",
    "directIO",
    "encrypt",
    "force",
    "http11",
    "insecure",
    "listBlocks",
    "noAutoDetect",
    "readOnly",
    "sharedDiskMode",
    "ssl",
    "test",
    "vhost",
)

_VALUED_FLAGS = (
    "accessEC2IAM",
    "accessFile",
    "accessId",
    "accessKey",
    "accessType",
    "authVersion",
    "baseURL",
    "blockCacheFile",
    "blockCacheMaxDirty",
    "blockCacheSize",
    "blockCacheThreads",
    "blockCacheTimeout",
    "blockCacheWriteDelay",
    "blockSize",
    "cacert",
    "compress",
    "defaultContentEncoding",
    "encryption",
    "filename",
    "fileMode",
    "initialRetryPause",
    "keyLength",
    "listBlocksThreads",
    "maxDownloadSpeed",
    "maxRetryPause",
    "maxUploadSpeed",
    "md5CacheSize",
    "md5CacheTime",
    "minWriteDelay",
    "passwordFile",
    "prefix",
    "region",
    "size",
    "sse",
    "sseKeyId",
    "statsFilename",
    "storageClass",
    "timeout",
)

PLUGIN_FLAGS: dict[str, FlagKind] = {
    **{name: FlagKind.BOOLEAN for name in _BOOLEAN_FLAGS},
    **{name: FlagKind.VALUED for name in _VALUED_FLAGS},
}


def flag_kind(name: str) -> FlagKind | None:
    """Return how the plugin flag ``name`` takes its value, or None if unknown."""
    return PLUGIN_FLAGS.get(name)
