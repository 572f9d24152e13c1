"""Versioned licenses that provide key ciphers and mint master keys."""