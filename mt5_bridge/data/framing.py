"""
Newline frame decoding for the producer byte stream.

The terminal writes one JSON record per line but TCP delivers arbitrary
fragments: a read may end mid-record, contain several records, or split a
multi-byte UTF-8 character. FrameDecoder reassembles complete lines and
carries the trailing partial fragment forward to the next read.
"""

DELIMITER = b"\n"


class FrameDecoder:
    """Per-connection line reassembly buffer."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self._buffer = bytearray()
        self.messages_emitted = 0
        self.bytes_received = 0
        self.closed = False

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet terminated by a newline."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> list[str]:
        """
        Append a chunk and return every message it completes, in order.

        Args:
            chunk: Raw bytes as read from the connection

        Returns:
            Complete messages (without the newline), possibly empty

        Raises:
            RuntimeError: If the decoder has already been closed
        """
        if self.closed:
            raise RuntimeError("Cannot feed a closed FrameDecoder")

        if not chunk:
            return []

        self.bytes_received += len(chunk)
        self._buffer.extend(chunk)

        if DELIMITER not in chunk:
            return []

        pieces = bytes(self._buffer).split(DELIMITER)
        # Last piece is the unterminated remainder, possibly empty
        self._buffer = bytearray(pieces.pop())

        messages = [piece.decode(self.encoding, errors="replace") for piece in pieces]
        self.messages_emitted += len(messages)
        return messages

    def close(self) -> int:
        """
        Close the decoder, discarding any unterminated remainder.

        Returns:
            Number of residual bytes discarded
        """
        discarded = len(self._buffer)
        self._buffer = bytearray()
        self.closed = True
        return discarded
