"""RIPEMD-160 message digest.

The message is held in a ByteBuffer, padded in place to a multiple of 64
bytes, and each 64-byte block is folded into a five word chaining state
(A, B, C, D, E) by two independent 80-step lines, "left" and "right",
whose outputs are recombined with the state the block started from.

"""
import logging
from enum import IntEnum

from byte_buffer import ByteBuffer
from ripemd_errors import AllocationFailure

logger = logging.getLogger(__name__)

MASK32 = 0xffffffff

# Bytes per block and steps per round.
BLOCK_BYTES = 64
RIPE_ITERATIONS = 16

# Bit rotation applied to C in every step.
NUM_C_ROTATIONS = 10

# Marker byte appended directly after the message.
LAST_BYTE_IN_LAST_BLOCK = 0x80


class BitwiseFunction(IntEnum):
    """Selector for the five nonlinear combining functions."""
    F0 = 0
    F1 = 1
    F2 = 2
    F3 = 3
    F4 = 4


def word_to_hex(word):
    """Render a 32-bit word as 8 hex digits, least significant byte first."""
    return (word & MASK32).to_bytes(4, 'little').hex()


class RIPEMD160:

    IV = (0x67452301, 0xefcdab89, 0x98badcfe, 0x10325476, 0xc3d2e1f0)

    # Message word order for each round of the left line.
    LEFT_PERM = (
        (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
        (7, 4, 13, 1, 10, 6, 15, 3, 12, 0, 9, 5, 2, 14, 11, 8),
        (3, 10, 14, 4, 9, 15, 8, 1, 2, 7, 0, 6, 13, 11, 5, 12),
        (1, 9, 11, 10, 0, 8, 12, 4, 13, 3, 7, 15, 14, 5, 6, 2),
        (4, 0, 5, 9, 7, 12, 2, 10, 14, 1, 3, 8, 11, 6, 15, 13),
    )

    RIGHT_PERM = (
        (5, 14, 7, 0, 9, 2, 11, 4, 13, 6, 15, 8, 1, 10, 3, 12),
        (6, 11, 3, 7, 0, 13, 5, 10, 14, 15, 8, 12, 4, 9, 1, 2),
        (15, 5, 1, 3, 7, 14, 6, 9, 11, 8, 12, 2, 10, 0, 4, 13),
        (8, 6, 4, 1, 3, 11, 15, 0, 5, 12, 2, 13, 9, 7, 10, 14),
        (12, 15, 10, 4, 1, 5, 8, 7, 6, 2, 13, 14, 0, 3, 9, 11),
    )

    # Left-rotation amounts for each step.
    LEFT_SHIFT = (
        (11, 14, 15, 12, 5, 8, 7, 9, 11, 13, 14, 15, 6, 7, 9, 8),
        (7, 6, 8, 13, 11, 9, 7, 15, 7, 12, 15, 9, 11, 7, 13, 12),
        (11, 13, 6, 7, 14, 9, 13, 15, 14, 8, 13, 6, 5, 12, 7, 5),
        (11, 12, 14, 15, 14, 15, 9, 8, 9, 14, 5, 6, 8, 6, 5, 12),
        (9, 15, 5, 11, 6, 8, 13, 12, 5, 12, 13, 14, 11, 8, 5, 6),
    )

    RIGHT_SHIFT = (
        (8, 9, 9, 11, 13, 15, 15, 5, 7, 7, 8, 11, 14, 14, 12, 6),
        (9, 13, 15, 7, 12, 8, 9, 11, 7, 7, 12, 7, 6, 15, 13, 11),
        (9, 7, 15, 11, 8, 6, 6, 14, 12, 13, 5, 14, 13, 13, 7, 5),
        (15, 5, 8, 11, 14, 14, 6, 14, 6, 9, 12, 9, 12, 5, 15, 8),
        (8, 5, 12, 9, 12, 5, 14, 6, 8, 13, 6, 5, 15, 13, 11, 11),
    )

    # Per-round additive constants ("noise").
    LEFT_NOISE = (0x00000000, 0x5a827999, 0x6ed9eba1, 0x8f1bbcdc, 0xa953fd4e)
    RIGHT_NOISE = (0x50a28be6, 0x5c4dd124, 0x6d703ef3, 0x7a6d76e9, 0x00000000)

    LEFT_FUNCTIONS = (BitwiseFunction.F0, BitwiseFunction.F1, BitwiseFunction.F2,
                      BitwiseFunction.F3, BitwiseFunction.F4)
    RIGHT_FUNCTIONS = tuple(reversed(LEFT_FUNCTIONS))

    def __init__(self):
        """Initialize to the RIPEMD-160 initial vector (IV)."""
        self.a, self.b, self.c, self.d, self.e = RIPEMD160.IV

    @property
    def state(self):
        return self.a, self.b, self.c, self.d, self.e

    @staticmethod
    def F(b, c, d, f):
        """RIPEMD-160 nonlinear function selected by f.

        F0: b ^ c ^ d
        F1: (b & c) | (~b & d)
        F2: (b | ~c) ^ d
        F3: (b & d) | (c & ~d)
        F4: b ^ (c | ~d)
        """
        if f == BitwiseFunction.F0:
            result = b ^ c ^ d
        elif f == BitwiseFunction.F1:
            result = (b & c) | (~b & d)
        elif f == BitwiseFunction.F2:
            result = (b | ~c) ^ d
        elif f == BitwiseFunction.F3:
            result = (b & d) | (c & ~d)
        elif f == BitwiseFunction.F4:
            result = b ^ (c | ~d)
        else:
            raise ValueError(f"Invalid bitwise function: {f!r}")
        return result & MASK32

    @staticmethod
    def rotate_left(value, s):
        """Rotate a 32-bit value left by s bits."""
        value &= MASK32
        return ((value << s) | (value >> (32 - s))) & MASK32

    @staticmethod
    def ripemd_iteration(state, datum, shift, noise, f):
        """Perform one step on the state tuple (a, b, c, d, e).

        T = ROT(a + F(b,c,d) + datum + noise, shift) and the new state is
        (e, T + e, b, ROT(c, 10), d).
        """
        a, b, c, d, e = state
        t = RIPEMD160.rotate_left(a + RIPEMD160.F(b, c, d, f) + datum + noise, shift)
        return e, (t + e) & MASK32, b, RIPEMD160.rotate_left(c, NUM_C_ROTATIONS), d

    @staticmethod
    def ripemd_round(state, words, perm, shift, noise, f):
        """Run the 16 steps of one round, taking words in perm order."""
        assert len(words) == RIPE_ITERATIONS
        assert len(perm) == RIPE_ITERATIONS and len(shift) == RIPE_ITERATIONS
        for i in range(RIPE_ITERATIONS):
            state = RIPEMD160.ripemd_iteration(state, words[perm[i]], shift[i], noise, f)
        return state

    @staticmethod
    def block_words(block):
        """Split a 64-byte block into 16 little-endian 32-bit words."""
        if len(block) != BLOCK_BYTES:
            raise ValueError(f"Block must be {BLOCK_BYTES} bytes, got {len(block)}")
        return [int.from_bytes(block[i:i + 4], 'little') for i in range(0, BLOCK_BYTES, 4)]

    @staticmethod
    def ripemd_line(state, words, perms, shifts, noises, functions):
        """Run all five rounds of one line starting from state."""
        for perm, shift, noise, f in zip(perms, shifts, noises, functions):
            state = RIPEMD160.ripemd_round(state, words, perm, shift, noise, f)
        return state

    def ripemd_block(self, block):
        """Process one 64-byte block and update the chaining state.

        Both lines start from the current state; the result is recombined
        with that same pre-block state.
        """
        words = RIPEMD160.block_words(block)
        start = self.state

        left = RIPEMD160.ripemd_line(start, words, RIPEMD160.LEFT_PERM, RIPEMD160.LEFT_SHIFT,
                                     RIPEMD160.LEFT_NOISE, RIPEMD160.LEFT_FUNCTIONS)
        right = RIPEMD160.ripemd_line(start, words, RIPEMD160.RIGHT_PERM, RIPEMD160.RIGHT_SHIFT,
                                      RIPEMD160.RIGHT_NOISE, RIPEMD160.RIGHT_FUNCTIONS)

        a, b, c, d, e = start
        self.a = (b + left[2] + right[3]) & MASK32
        self.b = (c + left[3] + right[4]) & MASK32
        self.c = (d + left[4] + right[0]) & MASK32
        self.d = (e + left[0] + right[1]) & MASK32
        self.e = (a + left[1] + right[2]) & MASK32

    @staticmethod
    def ripemd_padded(buffer):
        """Pad buffer in place to a multiple of 64 bytes.

        Padding: 0x80 byte, then 0x00 bytes up to 56 mod 64, then the bit
        length as a 64-bit little-endian field. Only the low 32 bits of the
        bit length are written; the high 32 bits are always zero.
        """
        length = len(buffer)
        num_bits = (length * 8) & MASK32
        buffer.add_byte(LAST_BYTE_IN_LAST_BLOCK)
        while len(buffer) % BLOCK_BYTES != BLOCK_BYTES - 8:
            buffer.add_byte(0)
        for b in num_bits.to_bytes(4, 'little'):
            buffer.add_byte(b)
        for _ in range(4):
            buffer.add_byte(0)
        logger.debug("Padded %d byte message to %d bytes", length, len(buffer))
        return buffer

    def ripemd_digest(self, buffer):
        """Pad buffer (in place) and fold every block into the state.

        A bytes-like argument is copied into a fresh ByteBuffer first.
        Returns self so the digest can be read off directly.
        """
        if not isinstance(buffer, ByteBuffer):
            buffer = ByteBuffer.from_bytes(buffer)
        RIPEMD160.ripemd_padded(buffer)
        num_blocks = len(buffer) // BLOCK_BYTES
        logger.debug("Hashing %d blocks", num_blocks)
        try:
            data = bytes(buffer)
        except MemoryError as e:
            raise AllocationFailure(len(buffer)) from e
        for i in range(num_blocks):
            self.ripemd_block(data[i * BLOCK_BYTES:(i + 1) * BLOCK_BYTES])
        return self

    def digest(self):
        """Return the 20-byte digest, each word least significant byte first."""
        return b"".join(w.to_bytes(4, 'little') for w in self.state)

    def hexdigest(self):
        """Return the digest as 40 lowercase hex characters."""
        return "".join(word_to_hex(w) for w in self.state)


def ripemd160(data):
    """Compute the RIPEMD-160 hex digest of a bytes-like object."""
    return RIPEMD160().ripemd_digest(data).hexdigest()
