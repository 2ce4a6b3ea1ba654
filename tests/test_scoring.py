from locatorforge.models import SelectorInfo
from locatorforge.scoring import is_ranked, kind_rank, rank_candidates


def test_rank_orders_by_reliability_then_kind() -> None:
    candidates = [
        SelectorInfo("//button", "xpath", "low"),
        SelectorInfo("Sign up", "text", "medium"),
        SelectorInfo("#signup", "css", "high"),
        SelectorInfo("button|Sign up", "role", "high"),
    ]
    ranked = rank_candidates(candidates)
    assert [item.kind for item in ranked] == ["role", "css", "text", "xpath"]
    assert is_ranked(ranked)
    assert not is_ranked(candidates)


def test_rank_keeps_discovery_order_for_ties() -> None:
    candidates = [
        SelectorInfo("button|Save", "role", "high"),
        SelectorInfo("button|Save changes", "role", "high"),
    ]
    assert rank_candidates(candidates) == candidates


def test_rank_is_idempotent() -> None:
    candidates = [
        SelectorInfo("Name", "placeholder", "high"),
        SelectorInfo('[name="q"]', "css", "medium"),
        SelectorInfo("q", "test-id", "medium"),
    ]
    once = rank_candidates(candidates)
    assert rank_candidates(once) == once
    assert [item.kind for item in once] == ["placeholder", "test-id", "css"]


def test_custom_kind_preference_and_unknown_kind() -> None:
    preference = ("css", "role")
    candidates = [
        SelectorInfo("button|Go", "role", "high"),
        SelectorInfo("#go", "css", "high"),
    ]
    assert [item.kind for item in rank_candidates(candidates, preference)] == ["css", "role"]
    assert kind_rank("text", preference) == len(preference)
