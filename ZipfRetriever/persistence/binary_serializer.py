"""
Binary persistence of the index.

Layout (little-endian, 4-byte integers):

    int32 documentCount
    documentCount x { int32 id; string rawText; string sourcePath;
                      string tokensCache; int32 freqCount;
                      freqCount x { string token; int32 count } }
    int32 termCount
    termCount x { string word; float64 idf; int32 postingCount;
                  postingCount x { int32 documentId; int32 termFrequency; float64 tfIdf } }

Strings are an int32 byte length (-1 for None) followed by UTF-8 bytes.
There is no version header or checksum.
"""
import logging
import os
import struct
from typing import BinaryIO, Iterable, List, Optional, Tuple

from ..errors import FormatError, IndexIOError
from ..preprocessing.document import Document
from ..tfidf_search.term import Term

log = logging.getLogger(__name__)

INT32 = struct.Struct("<i")
FLOAT64 = struct.Struct("<d")
NULL_LENGTH = -1


class _Writer:
    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def int32(self, value: int) -> None:
        self.stream.write(INT32.pack(value))

    def float64(self, value: float) -> None:
        self.stream.write(FLOAT64.pack(value))

    def string(self, value: Optional[str]) -> None:
        if value is None:
            self.int32(NULL_LENGTH)
            return
        data = value.encode("utf-8")
        self.int32(len(data))
        self.stream.write(data)


class _Reader:
    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def _read_exact(self, size: int) -> bytes:
        data = self.stream.read(size)
        if len(data) != size:
            raise FormatError(f"Unexpected end of stream: wanted {size} bytes, got {len(data)}")
        return data

    def int32(self) -> int:
        return INT32.unpack(self._read_exact(INT32.size))[0]

    def count(self, what: str) -> int:
        value = self.int32()
        if value < 0:
            raise FormatError(f"Negative {what} count: {value}")
        return value

    def float64(self) -> float:
        return FLOAT64.unpack(self._read_exact(FLOAT64.size))[0]

    def string(self) -> Optional[str]:
        length = self.int32()
        if length == NULL_LENGTH:
            return None
        if length < 0:
            raise FormatError(f"Invalid string length: {length}")
        try:
            return self._read_exact(length).decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError(f"Invalid UTF-8 string: {e}") from e


class BinarySerializer:
    """Stateless encoder/decoder between (terms, documents) and the binary format."""

    def save(self, path: str, terms: Iterable[Term], documents: Iterable[Document]) -> None:
        """
        Write the index to `path`, creating the parent directory if needed.

        Args:
            path: Output file path
            terms: Terms in the order they should be stored
            documents: Corpus documents
        """
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        terms = list(terms)
        documents = list(documents)
        with open(path, "wb") as f:
            self.write(f, terms, documents)
        log.info("Saved %d documents and %d terms to %s", len(documents), len(terms), path)

    def load(self, path: str) -> Tuple[List[Term], List[Document]]:
        """
        Read an index written by `save`.

        Returns:
            (terms, documents) in file order
        """
        if not os.path.isfile(path):
            raise IndexIOError(f"Index file not found: {path}")

        with open(path, "rb") as f:
            terms, documents = self.read(f)
        log.info("Loaded %d documents and %d terms from %s", len(documents), len(terms), path)
        return terms, documents

    def write(self, stream: BinaryIO, terms: List[Term], documents: List[Document]) -> None:
        writer = _Writer(stream)

        writer.int32(len(documents))
        for document in documents:
            writer.int32(document.id)
            writer.string(document.raw_text)
            writer.string(document.source_path)
            writer.string(document.tokens_cache)
            writer.int32(len(document.term_frequencies))
            for token, count in document.term_frequencies.items():
                writer.string(token)
                writer.int32(count)

        writer.int32(len(terms))
        for term in terms:
            writer.string(term.word)
            writer.float64(term.idf)
            writer.int32(len(term.postings))
            for posting in term.postings:
                writer.int32(posting.document.id)
                writer.int32(posting.term_frequency)
                writer.float64(posting.tf_idf)

    def read(self, stream: BinaryIO) -> Tuple[List[Term], List[Document]]:
        reader = _Reader(stream)

        documents = []
        for _ in range(reader.count("document")):
            document_id = reader.int32()
            raw_text = reader.string()
            source_path = reader.string()
            tokens_cache = reader.string()
            document = Document(document_id, raw_text, source_path, tokens_cache)
            for _ in range(reader.count("frequency")):
                token = reader.string()
                if token is None:
                    raise FormatError(f"Null token in document {document_id}")
                document.set_frequency(token, reader.int32())
            documents.append(document)

        terms = []
        for _ in range(reader.count("term")):
            word = reader.string()
            if not word:
                raise FormatError("Term with an empty word")
            term = Term(word, idf=reader.float64())
            for _ in range(reader.count("posting")):
                document_id = reader.int32()
                term_frequency = reader.int32()
                tf_idf = reader.float64()
                document = _find_document(documents, document_id)
                # Postings that point at unknown documents are dropped
                if document is not None:
                    term.add_document(document, term_frequency, tf_idf)
            terms.append(term)

        return terms, documents


def _find_document(documents: List[Document], document_id: int) -> Optional[Document]:
    for document in documents:
        if document.id == document_id:
            return document
    return None
