# -----------------------------------------------------------------------------
# /*
#  * Copyright (C) 2025 CodeStory
#  *
#  * This program is free software; you can redistribute it and/or modify
#  * it under the terms of the GNU General Public License as published by
#  * the Free Software Foundation; Version 2.
#  *
#  * This program is distributed in the hope that it will be useful,
#  * but WITHOUT ANY WARRANTY; without even the implied warranty of
#  * MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#  * GNU General Public License for more details.
#  *
#  * You should have received a copy of the GNU General Public License
#  * along with this program; if not, you can contact us at support@codestory.build
#  */
# -----------------------------------------------------------------------------

"""
Git "literal" binary patch encoding.

Mirrors emit_binary_diff_body() in git's diff.c and encode_85() in base85.c.
Any change to the alphabet or to the digit order makes the output unreadable
for git apply.
"""

import hashlib
import zlib

BASE85_ALPHABET = (
    "0123456789"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "!#$%&()*+-;<=>?@^_`{|}~"
)
_BASE85_VALUES = {char: value for value, char in enumerate(BASE85_ALPHABET)}

# raw (deflated) bytes per encoded line
BINARY_LINE_LENGTH = 52

NULL_SHA1 = "0" * 40


def git_blob_hash(data: bytes) -> str:
    """The object id git assigns to `data` as a blob."""
    return hashlib.sha1(b"blob %d\0" % len(data) + data).hexdigest()


def encode_base85(data: bytes) -> str:
    """
    Encode in 4-byte big-endian groups, five digits each, most significant
    first. A short final group uses only the bytes present, still shifted
    into the high positions, and still yields five digits.
    """
    chunks = []
    for pos in range(0, len(data), 4):
        accum = 0
        for shift, byte in zip((24, 16, 8, 0), data[pos : pos + 4]):
            accum |= byte << shift

        digits = []
        for _ in range(5):
            accum, value = divmod(accum, 85)
            digits.append(BASE85_ALPHABET[value])
        chunks.append("".join(reversed(digits)))

    return "".join(chunks)


def decode_base85(text: str, length: int) -> bytes:
    """Decode `text` back into exactly `length` bytes."""
    if len(text) % 5:
        raise ValueError(f"base85 text length {len(text)} is not a multiple of 5")

    out = bytearray()
    for pos in range(0, len(text), 5):
        accum = 0
        for char in text[pos : pos + 5]:
            try:
                accum = accum * 85 + _BASE85_VALUES[char]
            except KeyError:
                raise ValueError(f"invalid base85 character {char!r}") from None
        if accum > 0xFFFFFFFF:
            raise ValueError(f"base85 group {text[pos : pos + 5]!r} overflows")
        out += accum.to_bytes(4, "big")

    if length > len(out):
        raise ValueError(f"base85 text too short for {length} bytes")
    return bytes(out[:length])


def _line_length_char(length: int) -> str:
    if length <= 26:
        return chr(ord("A") + length - 1)
    return chr(ord("a") + length - 26 - 1)


def _line_length_value(char: str) -> int:
    if "A" <= char <= "Z":
        return ord(char) - ord("A") + 1
    if "a" <= char <= "z":
        return ord(char) - ord("a") + 26 + 1
    raise ValueError(f"invalid binary patch line length character {char!r}")


def emit_binary_diff_body(
    data: bytes, level: int = zlib.Z_DEFAULT_COMPRESSION
) -> str:
    """
    Deflate `data` and encode it as git binary patch lines.

    Each line holds at most 52 deflated bytes, prefixed by a character giving
    that count. The body ends with an empty line.
    """
    deflated = zlib.compress(data, level)

    buf = []
    for pos in range(0, len(deflated), BINARY_LINE_LENGTH):
        line = deflated[pos : pos + BINARY_LINE_LENGTH]
        buf.append(_line_length_char(len(line)) + encode_base85(line) + "\n")
    buf.append("\n")

    return "".join(buf)


def decode_binary_diff_body(body: str) -> bytes:
    """Inverse of emit_binary_diff_body(); stops at the first empty line."""
    deflated = bytearray()
    for line in body.split("\n"):
        if not line:
            break
        deflated += decode_base85(line[1:], _line_length_value(line[0]))

    return zlib.decompress(bytes(deflated))


def encode_binary_change(old_data: bytes | None, new_data: bytes | None) -> str:
    """
    Render the body of a git binary patch for one file.

    A None side is a file that does not exist (added or deleted), encoded
    with the all-zero hash and an empty literal. The new side is written
    before the old side, as git apply expects for a reversible patch.

    The returned text has no newline after the final blank line; the patch
    renderer supplies it when joining file sections.
    """
    if old_data is None:
        old_data = b""
        old_hash = NULL_SHA1
    else:
        old_hash = git_blob_hash(old_data)

    if new_data is None:
        new_data = b""
        new_hash = NULL_SHA1
    else:
        new_hash = git_blob_hash(new_data)

    content = [
        f"index {old_hash}..{new_hash}\n",
        "GIT binary patch\n",
        f"literal {len(new_data)}\n",
        emit_binary_diff_body(new_data),
        f"literal {len(old_data)}\n",
        emit_binary_diff_body(old_data),
    ]

    return "".join(content)[:-1]
