# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for micro_xpath and NamePath."""

import pytest

from genro_markup import (
    InvalidNameError,
    Leaf,
    NamePath,
    Tag,
    format_matches,
    micro_xpath,
)
from genro_markup.query import path_accepted


class TestMicroXpath:
    """Tests for structural leaf matching."""

    def test_two_subtrees(self, plano):
        """Both componente leaves under fuc/avaliacao match, in document order."""
        result = micro_xpath(plano, ['fuc', 'avaliacao', 'componente'])
        assert [leaf.get_attribute('nome') for leaf in result] == ['teste', 'Dissertacao']
        assert all(isinstance(leaf, Leaf) for leaf in result)

    def test_excludes_other_ancestor_chains(self, plano):
        """A componente under a different chain is not returned."""
        other = plano.tag('outro').tag('avaliacao').leaf('componente')
        result = micro_xpath(plano, ['fuc', 'avaliacao', 'componente'])
        assert other not in result
        assert len(result) == 2

    def test_suffix_match(self, plano):
        """The path does not need to reach the root."""
        plano.tag('outro').tag('avaliacao').leaf('componente')
        assert len(micro_xpath(plano, ['avaliacao', 'componente'])) == 3
        assert len(micro_xpath(plano, ['componente'])) == 3

    def test_root_anchored_path(self, plano):
        """A path naming the root still matches."""
        result = micro_xpath(plano, ['plano', 'fuc', 'ects'])
        assert [leaf.text for leaf in result] == ['6.0']

    def test_path_longer_than_chain(self, plano):
        """Names left over above the root reject the candidate."""
        assert micro_xpath(plano, ['extra', 'plano', 'curso']) == []

    def test_containers_are_not_terminal(self, plano):
        """Only leaves are returned."""
        assert micro_xpath(plano, ['fuc', 'avaliacao']) == []

    def test_mismatch_in_middle(self, plano):
        """A wrong intermediate name rejects the candidate."""
        assert micro_xpath(plano, ['fuc', 'outro', 'componente']) == []

    def test_empty_path(self, plano):
        """An empty path matches nothing."""
        assert micro_xpath(plano, []) == []

    def test_invalid_element_fails(self, plano):
        """Any invalid path element fails the whole query."""
        with pytest.raises(InvalidNameError):
            micro_xpath(plano, ['fuc', 'bad name', 'componente'])

    def test_string_path_rejected(self, plano):
        """A plain string is not split into one-letter names."""
        with pytest.raises(TypeError):
            micro_xpath(plano, 'componente')
        assert len(micro_xpath(plano, ['componente'])) == 2

    def test_query_is_read_only(self, plano):
        """Queries don't change the tree and can be repeated."""
        before = plano.as_dict()
        path = ['fuc', 'avaliacao', 'componente']
        assert micro_xpath(plano, path) == micro_xpath(plano, path)
        assert path == ['fuc', 'avaliacao', 'componente']
        assert plano.as_dict() == before

    def test_path_accepted(self):
        """path_accepted consumes the path from the leaf upwards."""
        root = Tag('a')
        leaf = Tag('b', root).leaf('c')
        assert path_accepted(leaf, ['b', 'c'])
        assert path_accepted(leaf, ['a', 'b', 'c'])
        assert not path_accepted(leaf, ['x', 'c'])
        assert not path_accepted(leaf, ['x', 'a', 'b', 'c'])


class TestNamePath:
    """Tests for the '/' path builder."""

    def test_build_with_slash(self):
        """NamePath / name appends a validated name."""
        path = NamePath('fuc') / 'avaliacao' / 'componente'
        assert path == ['fuc', 'avaliacao', 'componente']
        assert isinstance(path, NamePath)

    def test_prepend(self):
        """A name on the left is prepended."""
        assert 'fuc' / NamePath('avaliacao') == ['fuc', 'avaliacao']

    def test_invalid_name(self):
        """Invalid names fail as soon as they are added."""
        with pytest.raises(InvalidNameError):
            NamePath('fuc') / 'bad name'
        with pytest.raises(InvalidNameError):
            NamePath('')

    def test_original_unchanged(self):
        """'/' returns a new path."""
        base = NamePath('fuc')
        base / 'avaliacao'
        assert base == ['fuc']

    def test_query_with_name_path(self, plano):
        """NamePath works as a query path."""
        path = NamePath('fuc') / 'avaliacao' / 'componente'
        assert len(micro_xpath(plano, path)) == 2


class TestFormatMatches:
    """Tests for format_matches."""

    def test_format(self, plano):
        """Matches render one per line without indentation."""
        result = micro_xpath(plano, ['fuc', 'avaliacao', 'componente'])
        assert format_matches(result) == (
            "<componente nome='teste',  peso='40%'/>\n"
            "<componente nome='Dissertacao',  peso='60%'/>\n"
        )
