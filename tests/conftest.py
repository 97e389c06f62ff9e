import pytest

from tests.infrastructure import make_engine, parse_xml


@pytest.fixture
def doc():
    """Небольшой документ с элементами, текстом, комментарием и PI."""
    return parse_xml(
        '<book id="b1"><title>Intro</title><para>one<em>two</em>three</para>'
        "<!--note--><?fmt wide?><para>four</para></book>"
    )


@pytest.fixture
def engine(doc):
    """Движок без правил, привязанный к doc."""
    return make_engine(document=doc)
