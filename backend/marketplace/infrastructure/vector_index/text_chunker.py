"""Recursive character text splitter used before embedding entries."""

_DEFAULT_CHUNK_SIZE = 1200  # characters; a listing rarely needs more than one chunk
_DEFAULT_CHUNK_OVERLAP = 200
_SEPARATORS = ("\n\n", "\n", ". ", " ")


class TextChunker:
    """Splits text on paragraph breaks first, then lines, sentences, words.

    Short texts (most listings) come back as a single chunk.
    """

    def __init__(
        self,
        chunk_size: int = _DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = _DEFAULT_CHUNK_OVERLAP,
    ):
        if chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap

    def split(self, text: str) -> list[str]:
        text = text.strip()
        if not text:
            return []

        if len(text) <= self._chunk_size:
            return [text]

        chunks: list[str] = []
        self._recursive_split(text, list(_SEPARATORS), chunks)
        return chunks

    def _recursive_split(self, text: str, separators: list[str], chunks: list[str]) -> None:
        if len(text) <= self._chunk_size:
            if text.strip():
                chunks.append(text.strip())
            return

        best_sep = separators[-1]
        for sep in separators:
            if sep in text:
                best_sep = sep
                break

        parts = text.split(best_sep)
        current_chunk = ""

        for part in parts:
            candidate = f"{current_chunk}{best_sep}{part}" if current_chunk else part

            if len(candidate) > self._chunk_size and current_chunk:
                chunks.append(current_chunk.strip())
                # Carry the tail of the finished chunk into the next one
                overlap_text = current_chunk[-self._chunk_overlap :] if self._chunk_overlap else ""
                current_chunk = f"{overlap_text}{best_sep}{part}" if overlap_text else part
            else:
                current_chunk = candidate

        if not current_chunk.strip():
            return
        if len(current_chunk) > self._chunk_size and best_sep != separators[-1]:
            # A single part longer than the limit: split it with finer separators
            remaining = separators[separators.index(best_sep) + 1 :]
            self._recursive_split(current_chunk, remaining, chunks)
        else:
            chunks.append(current_chunk.strip())
