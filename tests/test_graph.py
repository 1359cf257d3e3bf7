"""Tests for the dependency graph."""

import logging

import pytest

from devtracker.lib import constants
from devtracker.lib.config import DEFAULT_COMPONENTS, DEFAULT_DEPENDENCIES
from devtracker.tracker.graph import Blocker, DependencyGraph
from devtracker.tracker.models import Component


def _components(**statuses) -> dict[str, Component]:
    return {name: Component(name=name, status=status) for name, status in statuses.items()}


@pytest.fixture
def default_graph():
    return DependencyGraph(DEFAULT_DEPENDENCIES, DEFAULT_COMPONENTS)


class TestEdges:
    """Tests for dependency and dependent lookups."""

    def test_dependencies_in_declaration_order(self, default_graph):
        assert default_graph.dependencies_of("BingoBlitz") == ("BingoFlash", "BingoBackend")

    def test_no_dependencies_is_empty(self, default_graph):
        assert default_graph.dependencies_of("Appwrite") == ()

    def test_unknown_component_has_no_edges(self, default_graph):
        assert default_graph.dependencies_of("Nope") == ()
        assert default_graph.dependents_of("Nope") == ()

    def test_dependents_are_inverse_of_dependencies(self, default_graph):
        assert default_graph.dependents_of("Appwrite") == ("BingoBackend", "BingoCore", "SUPERLogs")
        assert default_graph.dependents_of("BingoBackend") == ("BingoFlash", "BingoBlitz")

    def test_inverse_holds_for_every_pair(self, default_graph):
        """b in dependencies_of(a) iff a in dependents_of(b)."""
        for a in default_graph.nodes:
            for b in default_graph.nodes:
                assert (b in default_graph.dependencies_of(a)) == (a in default_graph.dependents_of(b))

    def test_edges_run_dependency_to_dependent(self):
        graph = DependencyGraph({"B": ["A"], "C": ["A", "B"]}, ["A", "B", "C"])
        assert graph.edges() == [("A", "B"), ("A", "C"), ("B", "C")]

    def test_roots_and_sinks(self, default_graph):
        assert default_graph.roots() == ["Appwrite"]
        assert default_graph.sinks() == ["BingoCore", "BingoBlitz", "SUPERLogs"]

    def test_has_edges(self):
        assert DependencyGraph({"A": ["B"]}).has_edges
        assert not DependencyGraph({"A": [], "B": []}).has_edges

    def test_names_only_in_table_become_nodes(self):
        graph = DependencyGraph({"A": ["Z"]}, ["A"])
        assert graph.nodes == ("A", "Z")


class TestReadiness:
    """Tests for readiness checks."""

    def test_not_ready_while_dependency_not_started(self):
        graph = DependencyGraph({"X": ["Y"]}, ["X", "Y"])
        readiness = graph.readiness("X", _components(X=constants.NOT_STARTED, Y=constants.NOT_STARTED))
        assert readiness.ready is False
        assert readiness.blockers == [Blocker("Y", constants.NOT_STARTED)]

    @pytest.mark.parametrize("status", [constants.REVIEW, constants.COMPLETED])
    def test_ready_once_dependency_satisfied(self, status):
        graph = DependencyGraph({"X": ["Y"]}, ["X", "Y"])
        readiness = graph.readiness("X", _components(X=constants.NOT_STARTED, Y=status))
        assert readiness.ready is True
        assert readiness.blockers == []

    @pytest.mark.parametrize("status", [constants.IN_PROGRESS, constants.BLOCKED])
    def test_unsatisfied_statuses_block(self, status):
        graph = DependencyGraph({"X": ["Y"]}, ["X", "Y"])
        readiness = graph.readiness("X", _components(X=constants.NOT_STARTED, Y=status))
        assert readiness.ready is False

    def test_no_dependencies_is_ready(self):
        graph = DependencyGraph({"Y": []}, ["Y"])
        assert graph.readiness("Y", _components(Y=constants.NOT_STARTED)).ready is True

    def test_missing_dependency_reports_unknown(self):
        graph = DependencyGraph({"X": ["Ghost"]}, ["X"])
        readiness = graph.readiness("X", _components(X=constants.NOT_STARTED))
        assert readiness.blockers == [Blocker("Ghost", constants.UNKNOWN_STATUS)]

    def test_blockers_in_declaration_order(self):
        graph = DependencyGraph({"X": ["B", "A"]}, ["X", "A", "B"])
        readiness = graph.readiness("X", _components(X=constants.NOT_STARTED, A=constants.BLOCKED, B=constants.IN_PROGRESS))
        assert [b.name for b in readiness.blockers] == ["B", "A"]

    def test_to_dict(self):
        graph = DependencyGraph({"X": ["Y"]}, ["X", "Y"])
        readiness = graph.readiness("X", _components(X=constants.NOT_STARTED, Y=constants.BLOCKED))
        assert readiness.to_dict() == {"ready": False, "blockers": [{"name": "Y", "status": "Blocked"}]}


class TestCycles:
    """Tests for cycle detection."""

    def test_acyclic_graph_has_no_cycle(self, default_graph):
        assert default_graph.find_cycle() is None

    def test_two_node_cycle(self):
        graph = DependencyGraph({"A": ["B"], "B": ["A"]}, ["A", "B"])
        assert graph.find_cycle() == ["A", "B", "A"]

    def test_cycle_warned_at_construction(self, caplog):
        with caplog.at_level(logging.WARNING):
            DependencyGraph({"A": ["B"], "B": ["C"], "C": ["A"]}, ["A", "B", "C"])
        assert "Dependency cycle detected" in caplog.text
