import io
import struct

import pytest

from ZipfRetriever.errors import FormatError, IndexIOError
from ZipfRetriever.persistence import BinarySerializer
from ZipfRetriever.preprocessing import Document
from ZipfRetriever.tfidf_search import Term


@pytest.fixture
def serializer():
    return BinarySerializer()


@pytest.fixture
def corpus():
    doc_a = Document(1, "Árbol y ñandú", "/corpus/a.txt").compute_frequencies(["árbol", "ñandú"])
    doc_b = Document(2, "árbol árbol", "/corpus/b.txt").compute_frequencies(["árbol", "árbol"])

    arbol = Term("árbol")
    arbol.add_document(doc_a, 1)
    arbol.add_document(doc_b, 2)
    nandu = Term("ñandú")
    nandu.add_document(doc_a, 1)
    for term in (arbol, nandu):
        term.compute_idf(2)

    return [arbol, nandu], [doc_a, doc_b]


def encode(serializer, terms, documents):
    stream = io.BytesIO()
    serializer.write(stream, terms, documents)
    return stream.getvalue()


def decode(serializer, data):
    return serializer.read(io.BytesIO(data))


def test_round_trip(serializer, corpus):
    terms, documents = corpus

    loaded_terms, loaded_documents = decode(serializer, encode(serializer, terms, documents))

    assert [document.id for document in loaded_documents] == [1, 2]
    assert loaded_documents[0].raw_text == "Árbol y ñandú"
    assert loaded_documents[0].source_path == "/corpus/a.txt"
    assert loaded_documents[1].term_frequencies == {"árbol": 2}

    assert [term.word for term in loaded_terms] == ["árbol", "ñandú"]
    nandu = loaded_terms[1]
    assert nandu.idf == pytest.approx(terms[1].idf)
    assert nandu.tf_idf_for(1) == pytest.approx(terms[1].tf_idf_for(1))
    assert loaded_terms[0].get_posting(2).term_frequency == 2


def test_postings_reference_loaded_documents(serializer, corpus):
    terms, documents = corpus

    loaded_terms, loaded_documents = decode(serializer, encode(serializer, terms, documents))

    assert loaded_terms[0].get_posting(1).document is loaded_documents[0]


def test_layout_is_little_endian(serializer, corpus):
    terms, documents = corpus

    data = encode(serializer, terms, documents)

    assert data[:4] == struct.pack("<i", 2)
    assert data[4:8] == struct.pack("<i", 1)
    text = "Árbol y ñandú".encode("utf-8")
    assert data[8:12] == struct.pack("<i", len(text))
    assert data[12:12 + len(text)] == text


def test_empty_index(serializer):
    data = encode(serializer, [], [])

    assert data == struct.pack("<i", 0) * 2
    assert decode(serializer, data) == ([], [])


def test_null_string_reads_as_empty_document_field(serializer):
    data = (struct.pack("<i", 1) + struct.pack("<i", 5)
            + struct.pack("<i", -1) * 3
            + struct.pack("<i", 0)
            + struct.pack("<i", 0))

    terms, documents = decode(serializer, data)

    assert terms == []
    assert documents[0].id == 5
    assert documents[0].raw_text == ""


def test_postings_to_unknown_documents_are_dropped(serializer, corpus):
    terms, documents = corpus
    orphan = Term("huerfano")
    orphan.add_document(Document(99), 1)

    loaded_terms, _ = decode(serializer, encode(serializer, terms + [orphan], documents))

    assert loaded_terms[-1].word == "huerfano"
    assert loaded_terms[-1].document_frequency == 0


def test_truncated_stream(serializer, corpus):
    terms, documents = corpus
    data = encode(serializer, terms, documents)

    with pytest.raises(FormatError):
        decode(serializer, data[:-3])
    with pytest.raises(FormatError):
        decode(serializer, data[:2])


def test_negative_count(serializer):
    with pytest.raises(FormatError):
        decode(serializer, struct.pack("<i", -5))


def test_invalid_utf8(serializer):
    data = struct.pack("<i", 1) + struct.pack("<i", 1) + struct.pack("<i", 2) + b"\xff\xfe"

    with pytest.raises(FormatError):
        decode(serializer, data)


def test_save_creates_parent_directory(serializer, corpus, tmp_path):
    terms, documents = corpus
    path = tmp_path / "nested" / "dir" / "index.bin"

    serializer.save(str(path), terms, documents)
    loaded_terms, loaded_documents = serializer.load(str(path))

    assert path.exists()
    assert len(loaded_terms) == 2
    assert len(loaded_documents) == 2


def test_load_missing_file(serializer, tmp_path):
    with pytest.raises(IndexIOError):
        serializer.load(str(tmp_path / "missing.bin"))
