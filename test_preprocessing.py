import pytest

from ZipfRetriever.preprocessing import Document, RegexMatchTokenizer, TextProcessor, create_pipeline
from ZipfRetriever.preprocessing.preprocess import (
    LowercasePreprocessor,
    MinLengthPreprocessor,
    PreprocessingPipeline,
    StopWordsPreprocessor,
)


@pytest.fixture
def processor():
    return TextProcessor()


class TestTokenizer:
    def test_extracts_letter_runs_with_positions(self):
        tokens = RegexMatchTokenizer().tokenize("abc123def, ñandú")

        assert [token.text for token in tokens] == ["abc", "def", "ñandú"]
        assert [token.position for token in tokens] == [0, 6, 11]

    def test_empty_input(self):
        assert RegexMatchTokenizer().tokenize("") == []


class TestTextProcessor:
    def test_removes_stop_words_and_short_tokens(self, processor):
        assert processor.tokenize("El gato y la casa del perro") == ["gato", "casa", "perro"]

    def test_lowercases_accented_words(self, processor):
        assert processor.tokenize("Niño jugó con el ÁRBOL") == ["niño", "jugó", "árbol"]

    def test_keeps_three_letter_words(self, processor):
        assert processor.tokenize("sol va mar") == ["sol", "mar"]

    def test_digits_and_punctuation_split_tokens(self, processor):
        assert processor.tokenize("casa123perro;gato") == ["casa", "perro", "gato"]

    def test_blank_text(self, processor):
        assert processor.tokenize("") == []
        assert processor.tokenize("   \n\t") == []
        assert processor.tokenize(None) == []

    def test_only_stop_words(self, processor):
        assert processor.tokenize("el la de los para") == []

    def test_callable(self, processor):
        assert processor("Perros") == ["perros"]

    def test_extra_stop_words(self):
        processor = TextProcessor(pipeline=create_pipeline(extra_stop_words=["Gato"]))

        assert processor.tokenize("gato perro") == ["perro"]

    def test_custom_min_length(self):
        processor = TextProcessor(pipeline=create_pipeline(min_token_length=5))

        assert processor.tokenize("perro gatos casa") == ["perro", "gatos"]

    def test_stop_words_file(self, tmp_path):
        stop_words_file = tmp_path / "stop.json"
        stop_words_file.write_text('["raton"]', encoding="utf-8")
        pipeline = PreprocessingPipeline([
            LowercasePreprocessor(),
            MinLengthPreprocessor(),
            StopWordsPreprocessor(stop_words_file=str(stop_words_file)),
        ])

        assert TextProcessor(pipeline=pipeline).tokenize("Raton queso") == ["queso"]


class TestDocument:
    def test_compute_frequencies_in_first_seen_order(self):
        document = Document(1, "gato perro gato").compute_frequencies(["gato", "perro", "gato"])

        assert document.term_frequencies == {"gato": 2, "perro": 1}
        assert list(document.term_frequencies) == ["gato", "perro"]

    def test_get_frequency_and_contains(self):
        document = Document(1).compute_frequencies(["gato", "gato"])

        assert document.get_frequency("GATO") == 2
        assert document.get_frequency("perro") == 0
        assert document.get_frequency("") == 0
        assert document.contains_term("gato")
        assert not document.contains_term("perro")

    def test_most_frequent_terms_ties_keep_first_seen_order(self):
        document = Document(1).compute_frequencies(["bbb", "aaa", "aaa", "ccc", "bbb", "ddd"])

        assert document.most_frequent_terms(3) == [("bbb", 2), ("aaa", 2), ("ccc", 1)]

    def test_statistics(self):
        document = Document(7, source_path="/corpus/a.txt").compute_frequencies(["gato", "perro", "gato"])
        stats = document.statistics()

        assert stats.document_id == 7
        assert stats.file_name == "a.txt"
        assert stats.unique_terms == 2
        assert stats.total_tokens == 3
        assert stats.most_frequent_term == "gato"
        assert stats.max_frequency == 2

    def test_none_fields_become_empty_strings(self):
        document = Document(1, None, None, None)

        assert document.raw_text == ""
        assert document.source_path == ""
        assert document.tokens_cache == ""
        assert document.file_name == ""

    def test_equality_by_id(self):
        assert Document(1, "a") == Document(1, "b")
        assert Document(1) != Document(2)
        assert len({Document(1), Document(1)}) == 1
