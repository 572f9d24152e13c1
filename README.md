# emitkey

A pure Python library for working with channel-scoped security keys in a
publish/subscribe broker. It has no dependencies outside the standard
library.

It covers:

- `emitkey.channel` – parsing channel strings such as
  `key/a/b/c/?ttl=30&last=5` into a key, a channel, its type and options;
- `emitkey.key` – 24-byte security keys carrying a salt, master id,
  contract, signature, permission flags, an expiry time and a hashed target
  channel;
- `emitkey.ciphers` – ciphers that turn such keys into 32-character
  URL-safe strings and back (`Xtea`, `Salsa` and `Shuffle`), plus a strict
  unpadded URL-safe base64 decoder;
- `emitkey.license` – licenses in three versions, each of which yields a
  cipher and can mint master keys;
- `emitkey.murmur` – the seeded, byte-swapped 32-bit Murmur3 hash used for
  channel parts;
- `emitkey.ident` – process-wide increasing identifiers.

## Parsing channels

```python
from emitkey.channel import ChannelType, parse_channel

channel = parse_channel(b"emitter/a/b/c/?ttl=42&last=10")
assert channel.channel_type is ChannelType.STATIC
print(channel.ttl())           # (42, True)
print(channel.last())          # (10, True)
print(channel.safe_string())   # a/b/c/?ttl=42&last=10
```

Wildcard parts (`+`, `#`, `*`) give a channel of type
`ChannelType.WILDCARD`; a malformed channel comes back with type
`ChannelType.INVALID` rather than raising. Other accessors:

- `target()` – the hash of the first channel part;
- `exclude()` – `True` when the option `me=0` is set;
- `window()` – the `from` and `until` options as UTC datetimes, with values
  outside 2018–2066 returned as the Unix epoch;
- `str(channel)` – the key, the channel and its options.

`make_channel(key, channel_with_options)` gives the same result from
separate key and channel strings.

## Security keys

```python
from emitkey.key import Key, Permission

key = Key(bytearray(24))
key.set_target("a/+/c/")
key.set_permission(Permission.READ, True)

assert key.has_permission(Permission.READ)
assert not key.is_master()
```

`Key()` with no argument is 24 zero bytes. The fields are properties:
`salt`, `master`, `contract`, `signature`, `permissions` and `expires`
(a UTC datetime; the Unix epoch means the key never expires, which
`is_expired()` honours).

`set_target` raises `TargetInvalidError` when the channel does not end in
`/` and `TargetTooLongError` when it has more than 23 parts.
`validate_channel(channel)` checks a parsed `Channel` against the key's
target, honouring `+` wildcards and a trailing `#/`.

## Encrypting keys

```python
from emitkey.ciphers.shuffle import Shuffle

cipher = Shuffle(bytes(32), bytes(16))
text = cipher.encrypt_key(key)
assert cipher.decrypt_key(text.encode()) == key
```

`Salsa(key, nonce)` takes a 32-byte key and a 24-byte nonce;
`Xtea(value)` takes a 22-character URL-safe base64 key. The constructors
raise `ValueError` on keys or nonces of the wrong size. `decrypt_key`
raises `ValueError` when its input is not 32 characters long, and
`CorruptInputError` (a `ValueError`) when it is not URL-safe base64.

The Salsa20 building blocks are available as `hsalsa20(key, nonce)` and
`xor_key_stream(data, counter, key)` in `emitkey.ciphers.salsa`.

## Licenses

```python
from emitkey.license.core import new, parse

license_text, master_text = new()
license = parse(license_text)
cipher = license.cipher()
master = cipher.decrypt_key(master_text.encode())
assert master.is_master()
```

`parse` accepts version 1, 2 and 3 licenses (a `:1`, `:2` or `:3` suffix,
with no suffix read as version 1) and raises `LicenseError` on input that
is missing or cannot be read. The classes `V1`, `V2` and `V3` each offer
`generate()`, `parse(data)`, `new_master_key(master_id)`, `cipher()`,
`contract()`, `signature()`, `master()` and `str()`.

`emitkey.license.codec` holds the helpers the license formats are built
on: `put_uvarint` / `read_uvarint`, `snappy_encode` / `snappy_decode`
(the encoder writes literal runs only) and `b64_encode` / `b64_decode`.
Malformed data raises `CodecError`.

## Hashing and identifiers

```python
from emitkey.murmur import of_string
from emitkey.ident import IDGenerator

print(of_string("hello world"))   # 4008393376

ids = IDGenerator(0)
first = ids.next_id()
print(str(first))                 # 01
print(first.unique(123, "hello")) # a stable base32 string
```

`new_id()` returns the next identifier from a process-wide generator seeded
with the seconds elapsed since 2015-01-01.

## What it does not do

This is a library only. It runs no broker, opens no network connections,
stores nothing and has no command-line interface; it only parses, hashes,
encrypts and decrypts the values a broker would work with.