import math

import pytest

from tes_thermal import (
    ThermalNetwork, NodeKind, ConstantPower,
    DuplicateNodeError, UnknownNodeError, InvalidParameterError,
    DisconnectedNetworkError, NoReferenceError, MultipleReferenceTemperaturesError,
)


def test_add_node_kinds():
    net = ThermalNetwork()
    mass = net.add_node('m', NodeKind.MASS, 100.0, 300.0)
    ref = net.add_node('r', 'reference', initial_temperature=290.0)
    assert mass.capacitance == 100.0
    assert not mass.is_reference
    assert ref.is_reference
    assert ref.capacitance is None
    assert [n.node_id for n in net.mass_nodes] == ['m']
    assert [n.node_id for n in net.reference_nodes] == ['r']
    assert len(net) == 2
    assert 'm' in net and 'x' not in net


def test_duplicate_node():
    net = ThermalNetwork()
    net.add_mass('m', 100.0, 300.0)
    with pytest.raises(DuplicateNodeError):
        net.add_mass('m', 50.0, 300.0)
    with pytest.raises(DuplicateNodeError):
        net.add_reference('m', 300.0)


@pytest.mark.parametrize('capacitance', [0.0, -1.0, math.inf, math.nan, None])
def test_mass_capacitance_must_be_positive_and_finite(capacitance):
    net = ThermalNetwork()
    with pytest.raises(InvalidParameterError):
        net.add_node('m', NodeKind.MASS, capacitance, 300.0)
    assert 'm' not in net


@pytest.mark.parametrize('temperature', [None, -5.0, 0.0, math.nan, math.inf])
def test_node_temperature_must_be_valid_kelvin(temperature):
    net = ThermalNetwork()
    with pytest.raises(InvalidParameterError):
        net.add_node('m', NodeKind.MASS, 100.0, temperature)


def test_unknown_kind():
    with pytest.raises(InvalidParameterError):
        ThermalNetwork().add_node('m', 'capacitor', 1.0, 300.0)


def test_add_link_errors():
    net = ThermalNetwork()
    net.add_mass('m', 100.0, 300.0)
    net.add_reference('r', 300.0)
    with pytest.raises(UnknownNodeError):
        net.add_link('m', 'nope', 1.0)
    with pytest.raises(UnknownNodeError):
        net.add_link('nope', 'r', 1.0)
    with pytest.raises(InvalidParameterError):
        net.add_link('m', 'r', -0.1)
    with pytest.raises(InvalidParameterError):
        net.add_link('m', 'r', math.nan)
    with pytest.raises(InvalidParameterError):
        net.add_link('m', 'm', 1.0)
    link = net.add_link('m', 'r', 0.0)
    assert link.other('m') == 'r'
    assert link.other('r') == 'm'
    assert net.links_for('m') == [link]


def test_add_source_errors():
    net = ThermalNetwork()
    net.add_mass('m', 100.0, 300.0)
    net.add_reference('r', 300.0)
    with pytest.raises(UnknownNodeError):
        net.add_source('nope', 10.0)
    with pytest.raises(InvalidParameterError):
        net.add_source('r', 10.0)
    with pytest.raises(InvalidParameterError):
        net.add_source('m', 'ten watts')

    constant = net.add_source('m', 10)
    assert isinstance(constant.power_fn, ConstantPower)
    assert constant.power(123.0) == 10.0

    varying = net.add_source('m', lambda t: 2.0 * t)
    assert varying.power(3.0) == 6.0
    assert len(net.sources_for('m')) == 2


@pytest.mark.parametrize('order', [
    ('node', 'link', 'source'),
    ('link', 'source', 'node'),
    ('source', 'node', 'link'),
])
def test_unknown_ids_fail_regardless_of_order(order):
    net = ThermalNetwork()
    net.add_reference('r', 300.0)
    for step in order:
        if step == 'node':
            net.add_mass(f'm{len(net)}', 10.0, 300.0)
        elif step == 'link':
            with pytest.raises(UnknownNodeError):
                net.add_link('ghost', 'r', 1.0)
        else:
            with pytest.raises(UnknownNodeError):
                net.add_source('ghost', 1.0)
    with pytest.raises(DuplicateNodeError):
        net.add_reference('r', 300.0)


def test_validate_ok_is_idempotent():
    net = ThermalNetwork()
    net.add_mass('a', 10.0, 300.0)
    net.add_mass('b', 10.0, 300.0)
    net.add_reference('r', 300.0)
    net.add_link('a', 'b', 1.0)
    net.add_link('b', 'r', 0.0)
    net.validate()
    net.validate()


def test_validate_disconnected_fails_identically():
    net = ThermalNetwork()
    net.add_mass('a', 10.0, 300.0)
    net.add_mass('island', 10.0, 300.0)
    net.add_reference('r', 300.0)
    net.add_link('a', 'r', 1.0)

    errors = []
    for _ in range(2):
        with pytest.raises(DisconnectedNetworkError) as exc:
            net.validate()
        errors.append(exc.value)
    assert errors[0].node_ids == errors[1].node_ids == ('island',)
    assert str(errors[0]) == str(errors[1])


def test_validate_no_reference():
    net = ThermalNetwork()
    net.add_mass('a', 10.0, 300.0)
    with pytest.raises(NoReferenceError):
        net.validate()


def test_validate_reference_temperatures():
    net = ThermalNetwork()
    net.add_mass('a', 10.0, 300.0)
    net.add_mass('b', 10.0, 300.0)
    net.add_reference('r1', 293.15)
    net.add_reference('r2', 293.15)
    net.add_link('a', 'r1', 1.0)
    net.add_link('b', 'r2', 1.0)
    net.validate()
    assert net.reference_temperature == 293.15

    net.add_reference('r3', 300.0)
    with pytest.raises(MultipleReferenceTemperaturesError):
        net.validate()


def test_get_node_unknown():
    with pytest.raises(UnknownNodeError):
        ThermalNetwork().get_node('x')
    # UnknownNodeError doubles as a KeyError
    with pytest.raises(KeyError):
        ThermalNetwork().get_node('x')


def test_dict_round_trip():
    data = {
        'name': 'pair',
        'nodes': [
            {'id': 'tes', 'kind': 'mass', 'capacitance': 1.35e8, 'initial_temperature': 293.15},
            {'id': 'load', 'kind': 'reference', 'initial_temperature': 293.15},
        ],
        'links': [{'node_a': 'tes', 'node_b': 'load', 'conductance': 500.0}],
        'sources': [{'node_id': 'tes', 'power': 1775.0}],
    }
    net = ThermalNetwork.from_dict(data)
    net.validate()
    out = net.to_dict()
    assert out['name'] == 'pair'
    assert out['links'] == data['links']
    assert out['sources'] == data['sources']
    assert out['nodes'][0]['capacitance'] == 1.35e8
    assert out['nodes'][1]['kind'] == 'reference'


def test_to_dict_rejects_time_varying_source():
    net = ThermalNetwork()
    net.add_mass('m', 1.0, 300.0)
    net.add_source('m', lambda t: t)
    with pytest.raises(InvalidParameterError):
        net.to_dict()
