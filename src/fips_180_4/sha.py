from typing import Iterator

from fixedint import UInt32

BLOCK_BYTE_LEN = 64
WORD_BYTE_LEN = 4
HASH_ROUNDS = 64
LENGTH_BYTE_LEN = 8
PADDING_BYTE = 0x80
# The message length is appended as a 64 bit integer, so anything longer
# cannot be represented.
MAX_MESSAGE_BIT_LEN = 2**64 - 1

# First thirty-two bits of the fractional parts of the cube roots of the
# first sixty-four prime numbers.
K = tuple(
    UInt32(i)
    for i in [
        0x428A2F98,
        0x71374491,
        0xB5C0FBCF,
        0xE9B5DBA5,
        0x3956C25B,
        0x59F111F1,
        0x923F82A4,
        0xAB1C5ED5,
        0xD807AA98,
        0x12835B01,
        0x243185BE,
        0x550C7DC3,
        0x72BE5D74,
        0x80DEB1FE,
        0x9BDC06A7,
        0xC19BF174,
        0xE49B69C1,
        0xEFBE4786,
        0x0FC19DC6,
        0x240CA1CC,
        0x2DE92C6F,
        0x4A7484AA,
        0x5CB0A9DC,
        0x76F988DA,
        0x983E5152,
        0xA831C66D,
        0xB00327C8,
        0xBF597FC7,
        0xC6E00BF3,
        0xD5A79147,
        0x06CA6351,
        0x14292967,
        0x27B70A85,
        0x2E1B2138,
        0x4D2C6DFC,
        0x53380D13,
        0x650A7354,
        0x766A0ABB,
        0x81C2C92E,
        0x92722C85,
        0xA2BFE8A1,
        0xA81A664B,
        0xC24B8B70,
        0xC76C51A3,
        0xD192E819,
        0xD6990624,
        0xF40E3585,
        0x106AA070,
        0x19A4C116,
        0x1E376C08,
        0x2748774C,
        0x34B0BCB5,
        0x391C0CB3,
        0x4ED8AA4A,
        0x5B9CCA4F,
        0x682E6FF3,
        0x748F82EE,
        0x78A5636F,
        0x84C87814,
        0x8CC70208,
        0x90BEFFFA,
        0xA4506CEB,
        0xBEF9A3F7,
        0xC67178F2,
    ]
)

# First thirty-two bits of the fractional parts of the square roots of the
# first eight prime numbers.
INITIAL_VALUE = tuple(
    UInt32(i)
    for i in [
        0x6A09E667,
        0xBB67AE85,
        0x3C6EF372,
        0xA54FF53A,
        0x510E527F,
        0x9B05688C,
        0x1F83D9AB,
        0x5BE0CD19,
    ]
)


class InputTooLarge(ValueError):
    """The message bit length does not fit in the 64 bit length suffix."""


def shr(x: int, n: int) -> UInt32:
    return UInt32(x) >> n


def rotr(x: int, n: int) -> UInt32:
    return shr(x, n) | (UInt32(x) << (32 - n))


class Sha256:
    """
    SHA-256 as described in FIPS 180-4, section 6.2.

    Each digest has two phases:

    1. Preprocessing: pad the message to a multiple of 512 bits and set the
       initial hash value.
    2. Hash computation: for each 512 bit block, prepare the message
       schedule, load the working variables from the current hash value,
       run the rounds, then add the working variables back into the hash
       value.

    All state is local to a call, so independent messages can be hashed
    concurrently.
    """

    @classmethod
    def ch(cls, x: int, y: int, z: int) -> UInt32:
        """Bits of y where x is set, bits of z where it isn't."""
        x = UInt32(x)
        return (x & y) ^ (~x & z)

    @classmethod
    def maj(cls, x: int, y: int, z: int) -> UInt32:
        """Bits set in at least two of x, y and z."""
        x = UInt32(x)
        return (x & y) ^ (x & z) ^ (y & z)

    @classmethod
    def bsig0(cls, x: int) -> UInt32:
        return rotr(x, 2) ^ rotr(x, 13) ^ rotr(x, 22)

    @classmethod
    def bsig1(cls, x: int) -> UInt32:
        return rotr(x, 6) ^ rotr(x, 11) ^ rotr(x, 25)

    @classmethod
    def ssig0(cls, x: int) -> UInt32:
        return rotr(x, 7) ^ rotr(x, 18) ^ shr(x, 3)

    @classmethod
    def ssig1(cls, x: int) -> UInt32:
        return rotr(x, 17) ^ rotr(x, 19) ^ shr(x, 10)

    @classmethod
    def pad(cls, message: bytes) -> bytes:
        L = len(message) * 8
        if L > MAX_MESSAGE_BIT_LEN:
            raise InputTooLarge(
                f"message of {len(message)} bytes exceeds the {MAX_MESSAGE_BIT_LEN} bit limit"
            )
        message = bytes(message)
        # Room left in the final block once the padding byte is written.
        # A message ending within 8 bytes of a block boundary spills its
        # length suffix into an extra block.
        K = (BLOCK_BYTE_LEN - LENGTH_BYTE_LEN - 1 - len(message)) % BLOCK_BYTE_LEN
        return (
            message
            + int.to_bytes(PADDING_BYTE, 1, "big")
            + bytes(K)
            + int.to_bytes(L, LENGTH_BYTE_LEN, "big")
        )

    @classmethod
    def blocks(cls, padded: bytes) -> Iterator[bytes]:
        for block_num in range(len(padded) // BLOCK_BYTE_LEN):
            yield padded[
                block_num * BLOCK_BYTE_LEN : (block_num + 1) * BLOCK_BYTE_LEN
            ]

    @classmethod
    def schedule(cls, block: bytes) -> list[UInt32]:
        w = [
            UInt32(
                int.from_bytes(
                    block[word * WORD_BYTE_LEN : (word + 1) * WORD_BYTE_LEN],
                    "big",
                )
            )
            for word in range(BLOCK_BYTE_LEN // WORD_BYTE_LEN)
        ]
        while len(w) < HASH_ROUNDS:
            w.append(cls.ssig1(w[-2]) + w[-7] + cls.ssig0(w[-15]) + w[-16])
        return w

    @classmethod
    def compress(cls, H: list[UInt32], block: bytes) -> list[UInt32]:
        w = cls.schedule(block)
        a, b, c, d, e, f, g, h = H
        for t in range(HASH_ROUNDS):
            t1 = h + cls.bsig1(e) + cls.ch(e, f, g) + K[t] + w[t]
            t2 = cls.bsig0(a) + cls.maj(a, b, c)
            h = g
            g = f
            f = e
            e = d + t1
            d = c
            c = b
            b = a
            a = t1 + t2
        return [
            intermediate_hash + working_variable
            for intermediate_hash, working_variable in zip(
                H, [a, b, c, d, e, f, g, h]
            )
        ]

    @classmethod
    def process(cls, message: bytes) -> list[UInt32]:
        H = list(INITIAL_VALUE)
        for block in cls.blocks(cls.pad(message)):
            H = cls.compress(H, block)
        return H

    @classmethod
    def digest(cls, message: bytes) -> bytes:
        return b"".join(
            [
                int.to_bytes(int(intermediate_hash), WORD_BYTE_LEN, "big")
                for intermediate_hash in cls.process(message)
            ]
        )

    @classmethod
    def hexdigest(cls, message: bytes) -> str:
        return "".join(
            [
                f"{int(intermediate_hash):08x}"
                for intermediate_hash in cls.process(message)
            ]
        )


def digest(message: bytes) -> str:
    """Return the SHA-256 digest of message as 64 lowercase hex characters.

    Raises InputTooLarge if the message is longer than 2**64 - 1 bits.
    """
    return Sha256.hexdigest(message)
