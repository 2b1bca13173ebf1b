from controllers.agents import IMMEDIATE, ConditionGated, Immediate, agent_for
from orchestrator.tree import Node


def test_agent_for_picks_variant_from_conditions():
    node = Node(tag="div")
    assert agent_for(None, node) is IMMEDIATE
    assert agent_for("", node) is IMMEDIATE
    agent = agent_for("visible", node)
    assert isinstance(agent, ConditionGated)
    assert agent.kind == "condition"
    assert agent.expression == "visible"


def test_immediate_always_allows():
    agent = Immediate()
    assert agent.kind == "immediate"
    assert agent.allows_activation
    agent.watch(lambda state: None)
    agent.destroy()
    assert agent.allows_activation


def test_condition_gate_notifies_on_change_only():
    agent = ConditionGated("visible", Node(tag="div"))
    seen = []
    agent.watch(seen.append)
    assert not agent.allows_activation
    agent.update(False)
    agent.update(True)
    agent.update(True)
    agent.update(False)
    assert seen == [True, False]


def test_condition_gate_uses_evaluator():
    node = Node(tag="div", attributes={"class": "shown"})
    state = {"ready": True}
    agent = ConditionGated("ready", node, lambda expression, element: state[expression])
    assert agent.allows_activation
    state["ready"] = False
    assert agent.refresh() is False
    assert not agent.allows_activation


def test_destroyed_gate_stays_silent():
    agent = ConditionGated("visible", Node(tag="div"))
    seen = []
    agent.watch(seen.append)
    agent.destroy()
    agent.update(True)
    agent.watch(seen.append)
    assert seen == []
    assert agent.destroyed
