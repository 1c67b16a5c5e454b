# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for Document and the batch edits."""

import logging

import pytest

from genro_markup import (
    Document,
    DuplicateAttributeError,
    InvalidEntityError,
    InvalidNameError,
    Leaf,
    Tag,
)


@pytest.fixture
def doc(plano):
    return Document(plano, name='plano')


class TestDocument:
    """Tests for construction and rendering."""

    def test_declaration(self, doc):
        """The declaration line uses version and encoding as given."""
        assert doc.declaration == '<?xml version=1.0 encoding=UTF-8?>'
        other = Document(Tag('x'), version=1.1, encoding='ISO-8859-1')
        assert other.declaration == '<?xml version=1.1 encoding=ISO-8859-1?>'

    def test_pretty_print(self):
        """The declaration is followed by the rendered root."""
        root = Tag('plano')
        Leaf('curso', root, 'MEI')
        assert Document(root).pretty_print() == (
            "<?xml version=1.0 encoding=UTF-8?>\n"
            "<plano>\n"
            "\t<curso> MEI </curso>\n"
            "</plano>\n"
        )

    def test_root_must_be_detached_tag(self):
        """Only a parentless Tag can be a document root."""
        root = Tag('plano')
        child = Tag('fuc', root)
        with pytest.raises(InvalidEntityError):
            Document(child)
        with pytest.raises(InvalidEntityError):
            Document(Leaf('curso', root))

    def test_find_all(self, doc):
        """find_all returns matches in document order."""
        found = doc.find_all('fuc')
        assert [f.get_attribute('codigo') for f in found] == ['M0000', 'M1111']
        assert doc.find_all('plano') == [doc.root]
        assert doc.find_all('missing') == []

    def test_micro_xpath(self, doc):
        """Document.micro_xpath queries from the root."""
        result = doc.micro_xpath(['fuc', 'avaliacao', 'componente'])
        assert len(result) == 2


class TestAddAttributeGlobally:
    """Tests for add_attribute_globally."""

    def test_adds_to_every_match(self, doc):
        """Every entity with the name gets the attribute."""
        added = doc.add_attribute_globally('componente', 'tipo', 'final')
        assert len(added) == 2
        assert [c.get_attribute('tipo') for c in doc.find_all('componente')] == [
            'final', 'final',
        ]

    def test_duplicate_changes_nothing(self, doc):
        """If one target already has the attribute none is added."""
        doc.root['fuc', 1].attribute('ano', '2')
        before = doc.root.as_dict()
        with pytest.raises(DuplicateAttributeError):
            doc.add_attribute_globally('fuc', 'ano', '1')
        assert doc.root.as_dict() == before

    def test_invalid_name(self, doc):
        """Invalid attribute names fail before anything is added."""
        before = doc.root.as_dict()
        with pytest.raises(InvalidNameError):
            doc.add_attribute_globally('fuc', 'bad name', '1')
        assert doc.root.as_dict() == before


class TestRenameGlobally:
    """Tests for rename_globally and rename_attribute_globally."""

    def test_rename_entities(self, doc):
        """Every match is renamed and counted."""
        assert doc.rename_globally('fuc', 'unidade') == 2
        assert doc.find_all('fuc') == []
        assert len(doc.find_all('unidade')) == 2

    def test_rename_root(self, doc):
        """The root is renamed like any other entity."""
        assert doc.rename_globally('plano', 'curriculo') == 1
        assert doc.root.name == 'curriculo'

    def test_rename_invalid(self, doc):
        """An invalid new name renames nothing."""
        with pytest.raises(InvalidNameError):
            doc.rename_globally('fuc', '1fuc')
        assert len(doc.find_all('fuc')) == 2

    def test_rename_attribute(self, doc):
        """Attributes are renamed on matching entities only."""
        doc.root['curso'].attribute('peso', '0')
        assert doc.rename_attribute_globally('componente', 'peso', 'percentagem') == 2
        assert doc.find_all('componente')[0].attr == {
            'nome': 'teste', 'percentagem': '40%',
        }
        assert doc.root['curso'].attr == {'peso': '0'}

    def test_rename_attribute_clash(self, doc):
        """A clash on any target renames nothing."""
        doc.find_all('componente')[1].attribute('percentagem', 'x')
        before = doc.root.as_dict()
        with pytest.raises(DuplicateAttributeError):
            doc.rename_attribute_globally('componente', 'peso', 'percentagem')
        assert doc.root.as_dict() == before


class TestRemoveGlobally:
    """Tests for remove_globally and remove_attribute_globally."""

    def test_remove_entities(self, doc):
        """All matches and their subtrees go away."""
        assert doc.remove_globally('avaliacao') == 2
        assert doc.find_all('componente') == []
        assert [c.name for c in doc.root['fuc'].children] == ['ects']

    def test_nested_matches_counted_once(self):
        """A match inside a removed match is not counted again."""
        root = Tag('a')
        outer = Tag('x', root)
        Tag('x', outer)
        Tag('x', root)
        assert Document(root).remove_globally('x') == 2
        assert root.children == []

    def test_root_is_kept(self, doc):
        """The root is never removed."""
        assert doc.remove_globally('plano') == 0
        assert len(doc.root.children) == 3

    def test_remove_attribute(self, doc):
        """Attributes are removed where present."""
        assert doc.remove_attribute_globally('componente', 'peso') == 2
        assert doc.remove_attribute_globally('componente', 'peso') == 0
        assert [c.attr for c in doc.find_all('componente')] == [
            {'nome': 'teste'}, {'nome': 'Dissertacao'},
        ]

    def test_logs_counts(self, doc, caplog):
        """Batch edits log what they did at debug level."""
        with caplog.at_level(logging.DEBUG, logger='genro_markup'):
            doc.remove_globally('avaliacao')
        assert 'Removed 2 <avaliacao> entities' in caplog.text
