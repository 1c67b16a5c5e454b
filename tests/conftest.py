# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures."""

import pytest

from genro_markup import Tag, tag


def _build_plano(plano: Tag) -> None:
    plano.leaf('curso', 'Mestrado em Engenharia Informatica')

    fuc = plano.tag('fuc')
    fuc.attribute('codigo', 'M0000')
    fuc.leaf('ects', '6.0')
    componente = fuc.tag('avaliacao').leaf('componente')
    componente.attribute('nome', 'teste')
    componente.attribute('peso', '40%')

    fuc = plano.tag('fuc')
    fuc.attribute('codigo', 'M1111')
    componente = fuc.tag('avaliacao').leaf('componente')
    componente.attribute('nome', 'Dissertacao')
    componente.attribute('peso', '60%')


@pytest.fixture
def plano() -> Tag:
    """A study plan with two 'fuc' subtrees, each with one componente."""
    return tag('plano', _build_plano)
