"""
Unit tests for the Network registry and its acyclicity checks.
"""

import pytest

from bnet.cpt import ConditionalProbabilityTable
from bnet.errors import (
    CyclicDependencyError,
    DuplicateVariableNameError,
    InvalidDeclarationError,
    UndeclaredVariableError,
)
from bnet.network import Network
from bnet.types import Variable


def _chain_network() -> Network:
    """A -> B -> C, all boolean."""
    net = Network("chain")
    for name in ("A", "B", "C"):
        net.add_variable(Variable(name, ["true", "false"]))
    a, b, c = (net.require_variable(n) for n in ("A", "B", "C"))
    net.connect(a, [], ConditionalProbabilityTable(a))
    net.connect(b, [a], ConditionalProbabilityTable(b))
    net.connect(c, [b], ConditionalProbabilityTable(c))
    return net


class TestRegistry:
    """Test suite for variable registration and lookup."""

    def test_add_and_lookup(self) -> None:
        net = Network()
        v = net.add_variable(Variable("Rain", ["yes", "no"]))
        assert net.get_variable_by_name("Rain") is v
        assert net.get_variable_by_name("Snow") is None
        assert "Rain" in net
        assert v in net
        assert len(net) == 1

    def test_duplicate_name_rejected(self) -> None:
        net = Network()
        net.add_variable(Variable("Rain", ["yes", "no"]))
        with pytest.raises(DuplicateVariableNameError, match="Rain"):
            net.add_variable(Variable("Rain", ["a", "b", "c"]))
        assert list(net.require_variable("Rain").domain.labels) == ["yes", "no"]

    def test_require_variable_undeclared(self) -> None:
        with pytest.raises(UndeclaredVariableError) as info:
            Network().require_variable("Ghost")
        assert info.value.name == "Ghost"

    def test_variables_keep_declaration_order(self) -> None:
        net = Network()
        for name in ("Z", "A", "M"):
            net.add_variable(Variable(name, ["0", "1"]))
        assert [v.name for v in net.variables] == ["Z", "A", "M"]
        assert [v.name for v in net] == ["Z", "A", "M"]


class TestConnect:
    """Test suite for Network.connect."""

    def test_parents_children_and_cpts(self) -> None:
        net = _chain_network()
        a, b, c = net.variables
        assert net.parents_of(b) == (a,)
        assert net.parents_of(a) == ()
        assert net.children_of(a) == [b]
        assert net.children_of(c) == []
        assert net.cpt_for(c).variable is c
        assert net.is_connected(c)

    def test_unregistered_variable_rejected(self) -> None:
        net = Network()
        net.add_variable(Variable("A", ["t", "f"]))
        stray = Variable("B", ["t", "f"])
        with pytest.raises(UndeclaredVariableError, match="'B'"):
            net.connect(stray, [], ConditionalProbabilityTable(stray))
        a = net.require_variable("A")
        with pytest.raises(UndeclaredVariableError, match="'B'"):
            net.connect(a, [stray], ConditionalProbabilityTable(a))

    def test_cycle_rejected_and_network_unchanged(self) -> None:
        net = _chain_network()
        a, b, c = net.variables
        old_cpt = net.cpt_for(a)
        with pytest.raises(CyclicDependencyError):
            net.connect(a, [c], ConditionalProbabilityTable(a))
        assert net.parents_of(a) == ()
        assert net.cpt_for(a) is old_cpt
        assert not net.as_graph().has_edge("C", "A")

    def test_same_name_with_other_domain_rejected(self) -> None:
        net = _chain_network()
        b = net.require_variable("B")
        impostor = Variable("A", ["low", "mid", "high"])
        with pytest.raises(InvalidDeclarationError, match="declared domain"):
            net.connect(b, [impostor], ConditionalProbabilityTable(b))
        assert net.parents_of(b)[0].domain.labels == ("true", "false")

    def test_equal_copy_resolves_to_registered_instance(self) -> None:
        net = _chain_network()
        a, b, c = net.variables
        copy_of_a = Variable("A", ["true", "false"])
        net.connect(c, [copy_of_a], ConditionalProbabilityTable(c))
        assert net.parents_of(c)[0] is a

    def test_self_parent_rejected(self) -> None:
        net = _chain_network()
        a = net.require_variable("A")
        with pytest.raises(CyclicDependencyError, match="own parent"):
            net.connect(a, [a], ConditionalProbabilityTable(a))

    def test_cpt_for_other_variable_rejected(self) -> None:
        net = _chain_network()
        a, b, _ = net.variables
        with pytest.raises(InvalidDeclarationError):
            net.connect(a, [], ConditionalProbabilityTable(b))

    def test_reconnect_replaces_parent_set(self) -> None:
        net = _chain_network()
        a, b, c = net.variables
        net.connect(c, [a], ConditionalProbabilityTable(c))
        assert net.parents_of(c) == (a,)
        assert net.children_of(b) == []
        assert set(net.as_graph().edges()) == {("A", "B"), ("A", "C")}

    def test_topological_order(self) -> None:
        net = Network()
        for name in ("C", "B", "A", "D"):
            net.add_variable(Variable(name, ["t", "f"]))
        c, b, a, d = net.variables
        net.connect(c, [b, a], ConditionalProbabilityTable(c))
        net.connect(b, [a], ConditionalProbabilityTable(b))
        order = [v.name for v in net.topological_order()]
        # Ready nodes are taken in declaration order (C, B, A, D).
        assert order == ["A", "B", "C", "D"]
