"""Hide a short payload inside visible text using zero-width code points.

The bot keeps no database, so the id of the message a preview belongs to is
carried in the preview's own embed title. Every byte of the UTF-8 payload is
split into two nibbles and each nibble becomes one invisible code point from
the U+2060 block. U+2065 is unassigned, so nibble 5 is written as U+200B
instead; previews posted by earlier deployments use the same table.
"""

from __future__ import annotations

from drivecord.core.exceptions import PayloadDecodeError

SEPARATOR = "\u200f"

_NIBBLE_BASE = 0x2060
_NIBBLE_TO_CHAR = tuple(
    "\u200b" if nibble == 5 else chr(_NIBBLE_BASE + nibble) for nibble in range(16)
)
_CHAR_TO_NIBBLE = {char: nibble for nibble, char in enumerate(_NIBBLE_TO_CHAR)}


def encode(payload: str) -> str:
    """Encode `payload` as a sequence of invisible code points."""
    return "".join(
        _NIBBLE_TO_CHAR[byte >> 4] + _NIBBLE_TO_CHAR[byte & 0x0F]
        for byte in payload.encode("utf-8")
    )


def decode(encoded: str) -> str:
    """Decode a sequence produced by `encode`.

    Raises:
        PayloadDecodeError: The sequence has an odd length, contains a code
            point outside the alphabet, or does not decode to UTF-8.

    """
    if len(encoded) % 2:
        message = f"Encoded payload has odd length {len(encoded)}"
        raise PayloadDecodeError(message)

    try:
        nibbles = [_CHAR_TO_NIBBLE[char] for char in encoded]
    except KeyError as exc:
        message = f"Unexpected code point U+{ord(exc.args[0]):04X} in payload"
        raise PayloadDecodeError(message) from exc

    data = bytes(
        (high << 4) | low for high, low in zip(nibbles[::2], nibbles[1::2], strict=True)
    )
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        message = "Hidden payload is not valid UTF-8"
        raise PayloadDecodeError(message) from exc


def append(visible: str, payload: str) -> str:
    """Return `visible` followed by the separator and the encoded `payload`."""
    return f"{visible}{SEPARATOR}{encode(payload)}"


def decode_appended(text: str) -> str:
    """Decode the payload after the last separator in `text`.

    Raises:
        PayloadDecodeError: No separator is present or the tail is malformed.

    """
    index = text.rfind(SEPARATOR)
    if index == -1:
        message = "Text carries no hidden payload"
        raise PayloadDecodeError(message)
    return decode(text[index + len(SEPARATOR) :])


def strip_appended(text: str) -> str:
    """Return the visible part of `text`, dropping any appended payload."""
    index = text.rfind(SEPARATOR)
    return text if index == -1 else text[:index]
