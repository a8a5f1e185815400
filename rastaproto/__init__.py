"""RaSTA safety and redundancy layer packets, checksums, connection list and defer queue."""

__version__ = "0.1.0"

__all__ = ["crc", "md4", "hashing", "packets", "factory", "connections", "deferqueue"]