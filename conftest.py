import pytest

UNIQUE_WORDS = ["alfa", "beta", "gamma", "delta", "epsilon",
                "zeta", "theta", "kappa", "lambda", "sigma"]


def write_corpus(directory, texts):
    directory.mkdir(parents=True, exist_ok=True)
    for name, text in texts.items():
        (directory / name).write_text(text, encoding="utf-8")
    return directory


@pytest.fixture
def animal_corpus(tmp_path):
    """Three documents: a.txt shares 'gato' with the query, c.txt shares nothing."""
    return write_corpus(tmp_path / "animals", {
        "a.txt": "gato perro gato",
        "b.txt": "perro perro",
        "c.txt": "pajaro",
    })


@pytest.fixture
def common_word_corpus(tmp_path):
    """Ten documents that all contain 'comun' plus one word of their own."""
    texts = {f"doc{i:02d}.txt": f"comun {word}" for i, word in enumerate(UNIQUE_WORDS)}
    return write_corpus(tmp_path / "common", texts)
