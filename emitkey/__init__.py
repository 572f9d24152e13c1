"""Channel parsing, security keys, key ciphers, licenses and hashing for a pub/sub broker."""

__version__ = "0.1.0"