"""
CPlayground - Digest Module (SHA-256 from scratch)

This single file contains the hash primitive used to store passwords.
It's designed to be:
- Easy to follow next to the published algorithm (FIPS 180-4)
- Free of hashlib (the whole point is to see the rounds)
- Byte-identical to any other SHA-256 implementation

How a digest is computed:
    1. init()      -> fresh DigestState (8 initial words, empty buffer)
    2. absorb()    -> bytes are buffered; every full 64-byte block is compressed
    3. finalize()  -> padding + bit length appended, last block(s) compressed
    4. hex_of()    -> 32 digest bytes rendered as 64 lowercase hex characters

All arithmetic is unsigned 32-bit: every addition is masked with MASK32.
"""

from typing import List, Optional

from cryptography.hazmat.primitives import constant_time


# =============================================================================
# Constants
# =============================================================================

BLOCK_SIZE = 64          # bytes per compression block
DIGEST_SIZE = 32         # 256-bit output
LENGTH_FIELD = 8         # big-endian bit count at the end of the last block
MASK32 = 0xFFFFFFFF

# First 32 bits of the fractional parts of the square roots of the first 8 primes
INITIAL_STATE = (
    0x6a09e667, 0xbb67ae85, 0x3c6ef372, 0xa54ff53a,
    0x510e527f, 0x9b05688c, 0x1f83d9ab, 0x5be0cd19,
)

# First 32 bits of the fractional parts of the cube roots of the first 64 primes
ROUND_CONSTANTS = (
    0x428a2f98, 0x71374491, 0xb5c0fbcf, 0xe9b5dba5, 0x3956c25b, 0x59f111f1, 0x923f82a4, 0xab1c5ed5,
    0xd807aa98, 0x12835b01, 0x243185be, 0x550c7dc3, 0x72be5d74, 0x80deb1fe, 0x9bdc06a7, 0xc19bf174,
    0xe49b69c1, 0xefbe4786, 0x0fc19dc6, 0x240ca1cc, 0x2de92c6f, 0x4a7484aa, 0x5cb0a9dc, 0x76f988da,
    0x983e5152, 0xa831c66d, 0xb00327c8, 0xbf597fc7, 0xc6e00bf3, 0xd5a79147, 0x06ca6351, 0x14292967,
    0x27b70a85, 0x2e1b2138, 0x4d2c6dfc, 0x53380d13, 0x650a7354, 0x766a0abb, 0x81c2c92e, 0x92722c85,
    0xa2bfe8a1, 0xa81a664b, 0xc24b8b70, 0xc76c51a3, 0xd192e819, 0xd6990624, 0xf40e3585, 0x106aa070,
    0x19a4c116, 0x1e376c08, 0x2748774c, 0x34b0bcb5, 0x391c0cb3, 0x4ed8aa4a, 0x5b9cca4f, 0x682e6ff3,
    0x748f82ee, 0x78a5636f, 0x84c87814, 0x8cc70208, 0x90befffa, 0xa4506ceb, 0xbef9a3f7, 0xc67178f2,
)


# =============================================================================
# Mixing Functions
# =============================================================================

def _rotr(x: int, n: int) -> int:
    """Circular right rotation over 32 bits."""
    return ((x >> n) | (x << (32 - n))) & MASK32


def _ch(x: int, y: int, z: int) -> int:
    # "choose": x picks bits from y where set, from z where clear
    return (x & y) ^ (~x & z)


def _maj(x: int, y: int, z: int) -> int:
    return (x & y) ^ (x & z) ^ (y & z)


def _big_sigma0(x: int) -> int:
    return _rotr(x, 2) ^ _rotr(x, 13) ^ _rotr(x, 22)


def _big_sigma1(x: int) -> int:
    return _rotr(x, 6) ^ _rotr(x, 11) ^ _rotr(x, 25)


def _small_sigma0(x: int) -> int:
    return _rotr(x, 7) ^ _rotr(x, 18) ^ (x >> 3)


def _small_sigma1(x: int) -> int:
    return _rotr(x, 17) ^ _rotr(x, 19) ^ (x >> 10)


# =============================================================================
# Compression
# =============================================================================

def compress(state: List[int], block: bytes) -> List[int]:
    """
    Fold one 64-byte block into the eight running state words.

    Steps:
    - Split the block into 16 big-endian 32-bit message words
    - Expand them to 64 words with the two small sigma functions
    - Run 64 rounds over working variables a..h
    - Add the result back into the previous state (mod 2^32)

    Args:
        state: Eight 32-bit words (not modified)
        block: Exactly 64 bytes

    Returns:
        New list of eight 32-bit words
    """
    w = [int.from_bytes(block[i:i + 4], 'big') for i in range(0, BLOCK_SIZE, 4)]
    for i in range(16, 64):
        w.append((_small_sigma1(w[i - 2]) + w[i - 7] + _small_sigma0(w[i - 15]) + w[i - 16]) & MASK32)

    a, b, c, d, e, f, g, h = state
    for i in range(64):
        t1 = (h + _big_sigma1(e) + _ch(e, f, g) + ROUND_CONSTANTS[i] + w[i]) & MASK32
        t2 = (_big_sigma0(a) + _maj(a, b, c)) & MASK32
        h, g, f, e = g, f, e, (d + t1) & MASK32
        d, c, b, a = c, b, a, (t1 + t2) & MASK32

    return [(x + y) & MASK32 for x, y in zip(state, (a, b, c, d, e, f, g, h))]


# =============================================================================
# Digest State
# =============================================================================

class DigestState:
    """
    Single-use SHA-256 accumulator.

    Holds the pending block buffer, the total bit count and the eight hash
    words. Once finalize() has run the state is spent: absorbing into it or
    finalizing it again raises RuntimeError.
    """

    def __init__(self):
        self.buffer = bytearray()
        self.bit_count = 0
        self.words = list(INITIAL_STATE)
        self.finalized = False

    @property
    def buffered(self) -> int:
        """Number of bytes waiting for a full block (0-63)."""
        return len(self.buffer)

    def copy(self) -> "DigestState":
        """Snapshot a running state so two digests can diverge from it."""
        self._require_open()
        other = DigestState()
        other.buffer = bytearray(self.buffer)
        other.bit_count = self.bit_count
        other.words = list(self.words)
        return other

    def _require_open(self) -> None:
        if self.finalized:
            raise RuntimeError("Digest state already finalized. Call init() for a new one.")


def init() -> DigestState:
    """Return a fresh state holding the SHA-256 initial words."""
    return DigestState()


def absorb(state: DigestState, data: bytes) -> None:
    """
    Feed bytes into the digest.

    Every time the buffer fills to 64 bytes it is compressed into the state
    words and cleared. Accepts any length, including zero.

    Args:
        state: State from init() (mutated in place)
        data: Bytes to hash
    """
    state._require_open()
    state.buffer.extend(data)
    state.bit_count += len(data) * 8

    full = len(state.buffer) - len(state.buffer) % BLOCK_SIZE
    for offset in range(0, full, BLOCK_SIZE):
        state.words = compress(state.words, state.buffer[offset:offset + BLOCK_SIZE])
    del state.buffer[:full]


def finalize(state: DigestState) -> bytes:
    """
    Pad, compress the last block(s) and return the 32-byte digest.

    Padding: one 0x80 byte, then zeros until 8 bytes remain in the block,
    then the total bit count as a 64-bit big-endian integer. When fewer than
    9 bytes are free in the current block, the padding spills into a second
    block.

    Args:
        state: State from init()/absorb() (consumed)

    Returns:
        32 digest bytes, most significant byte of each word first
    """
    state._require_open()

    pad_len = (BLOCK_SIZE - LENGTH_FIELD - 1 - state.buffered) % BLOCK_SIZE
    tail = bytes(state.buffer) + b"\x80" + b"\x00" * pad_len
    tail += (state.bit_count & 0xFFFFFFFFFFFFFFFF).to_bytes(LENGTH_FIELD, 'big')

    words = state.words
    for offset in range(0, len(tail), BLOCK_SIZE):
        words = compress(words, tail[offset:offset + BLOCK_SIZE])

    state.words = words
    state.buffer.clear()
    state.finalized = True

    return b"".join(word.to_bytes(4, 'big') for word in words)


# =============================================================================
# Helpers
# =============================================================================

def hex_of(data: bytes) -> str:
    """Render bytes as lowercase hex, two characters per byte."""
    return ''.join(f"{byte:02x}" for byte in data)


def digest_hex(data) -> str:
    """
    Hash bytes (or a str, encoded as UTF-8) and return 64 hex characters.

    This is what the credential store keeps instead of the password.
    """
    if isinstance(data, str):
        data = data.encode('utf-8')
    state = init()
    absorb(state, data)
    return hex_of(finalize(state))


def constant_compare(a: str, b: Optional[str]) -> bool:
    """
    Compare two hex digests in constant time.

    Normal comparison (a == b) stops at the first mismatching character,
    which leaks how much of a stored hash an attacker has guessed.
    """
    if b is None:
        return False
    return constant_time.bytes_eq(a.encode('utf-8'), b.encode('utf-8'))
