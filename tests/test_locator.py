"""
Тесты вычисления пути к узлу.
"""

from lxml import etree

from xps.bridge import LxmlBridge
from xps.locator import LocationResolver
from tests.infrastructure import first, parse_xml


def _locator(doc):
    return LocationResolver(LxmlBridge(doc))


def test_document_and_root():
    doc = parse_xml("<root/>")
    locator = _locator(doc)

    assert locator.locate(doc) == ""
    assert locator.locate(doc.getroot()) == "/root[1]"


def test_same_name_siblings_get_ordinals():
    doc = parse_xml("<root><b/><b/></root>")
    locator = _locator(doc)
    root = doc.getroot()
    second_b = root[1]

    assert locator.locate(second_b) == locator.locate(root) + "/b[2]"


def test_id_attribute_shortcut():
    doc = parse_xml('<root><a/><a/><a id="x"/></root>')
    locator = _locator(doc)

    assert locator.locate(doc.getroot()[2]) == '/root[1]/a[@id="x"]'


def test_ordinal_counts_only_same_name():
    doc = parse_xml("<root><a/><c/><a/><c/></root>")
    locator = _locator(doc)

    assert locator.locate(doc.getroot()[3]) == "/root[1]/c[2]"


def test_text_nodes():
    doc = parse_xml("<p>one<em>two</em>three</p>")
    locator = _locator(doc)
    one, three = doc.getroot().xpath("text()")

    assert locator.locate(one) == "/p[1]/text()[1]"
    assert locator.locate(three) == "/p[1]/text()[2]"


def test_comment_and_pi():
    doc = parse_xml("<r><!--a--><x/><!--b--><?t data?></r>")
    locator = _locator(doc)

    assert locator.locate(first(doc, "//comment()[2]")) == "/r[1]/comment()[2]"
    assert locator.locate(first(doc, "//processing-instruction()")) == "/r[1]/processing-instruction()[1]"


def test_namespaced_elements():
    doc = parse_xml('<r xmlns:p="urn:p"><p:item/><p:item/></r>')
    locator = _locator(doc)

    assert locator.locate(doc.getroot()[1]) == "/r[1]/p:item[2]"


def test_strange_node():
    root = etree.fromstring("<root/>")
    root.append(etree.Entity("amp"))
    locator = _locator(root.getroottree())

    assert locator.locate(root[0]) == "/root[1]/strange-node()"
