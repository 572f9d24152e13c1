"""Ciphers that encrypt security keys into URL-safe strings and back."""