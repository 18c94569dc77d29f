import threading
from typing import List

import pytest
from pytest import param

from apisidebar.errors import MalformedOperationError
from apisidebar.schemas import GroupingRules, NodeKind, Operation
from apisidebar.synthesizer import SidebarSynthesizer, render_hint, synthesize


def _labels(nodes) -> List[str]:
    return [node.label for node in nodes]


def test_synthesis_is_deterministic(case_operations: List[Operation]):
    first = synthesize(case_operations)
    second = synthesize(case_operations)

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_every_operation_lands_in_exactly_one_leaf(case_operations: List[Operation]):
    tree = synthesize(case_operations)

    leaves = tree.leaves()
    assert len(leaves) == len(case_operations)
    assert all(leaf.kind == NodeKind.LEAF for leaf in leaves)


def test_leaf_identifiers_are_unique(case_operations: List[Operation]):
    tree = synthesize(case_operations)

    target_ids = [leaf.target_id for leaf in tree.leaves()]
    labels = [leaf.label for leaf in tree.leaves()]
    assert len(set(target_ids)) == len(target_ids)
    assert len(set(labels)) == len(labels)


def test_categories_follow_first_appearance(case_operations: List[Operation]):
    tree = synthesize(case_operations)

    assert _labels(tree.categories) == ["cases", "batch", "Internal LLM", "UNTAGGED"]
    cases = tree.categories[0]
    assert _labels(cases.children) == ["listCases", "createCase", "uploadLegacy"]


def test_items_ordered_by_source_order_not_input_position():
    operations = [
        Operation(operation_id="third", method="get", label="third", tag="a", source_order=2),
        Operation(operation_id="first", method="get", label="first", tag="a", source_order=0),
        Operation(operation_id="second", method="get", label="second", tag="b", source_order=1),
    ]

    tree = synthesize(operations)

    assert _labels(tree.categories) == ["a", "b"]
    assert _labels(tree.categories[0].children) == ["first", "third"]


def test_collision_suffix_is_global_across_categories():
    operations = [
        Operation(operation_id="resolve", method="get", label="resolve", tag="A"),
        Operation(operation_id="resolve", method="get", label="resolve", tag="B"),
    ]

    tree = synthesize(operations)

    a, b = tree.categories
    assert a.children[0].target_id == "resolve"
    assert a.children[0].label == "resolve"
    assert b.children[0].target_id == "resolve_1"
    assert b.children[0].label == "resolve_1"


def test_repeated_collisions_count_up():
    operations = [
        Operation(operation_id="listKeys", method="get", label="listKeys", tag=tag)
        for tag in ("LLM Providers", "Azure OCR Providers", "Other Providers")
    ]

    tree = synthesize(operations)

    assert [leaf.target_id for leaf in tree.leaves()] == ["listKeys", "listKeys_1", "listKeys_2"]


def test_suffix_skips_identifiers_already_taken():
    operations = [
        Operation(operation_id="resolve_1", method="get", label="resolve_1", tag="A"),
        Operation(operation_id="resolve", method="get", label="resolve", tag="A"),
        Operation(operation_id="resolve", method="get", label="resolve", tag="B"),
    ]

    tree = synthesize(operations)

    assert [leaf.target_id for leaf in tree.leaves()] == ["resolve_1", "resolve", "resolve_2"]


def test_slug_level_collisions_are_suffixed():
    operations = [
        Operation(operation_id="listKeys", method="get", label="listKeys", tag="A"),
        Operation(operation_id="list-keys", method="get", label="list-keys", tag="B"),
    ]

    tree = synthesize(operations)

    assert [leaf.target_id for leaf in tree.leaves()] == ["listKeys", "list-keys_1"]


def test_label_collision_with_distinct_ids_suffixes_both():
    operations = [
        Operation(operation_id="getCase", method="get", label="Get case", tag="cases"),
        Operation(operation_id="getCaseV2", method="get", label="Get case", tag="cases"),
    ]

    tree = synthesize(operations)

    second = tree.leaves()[1]
    assert second.label == "Get case_1"
    assert second.target_id == "getCaseV2_1"


def test_untagged_category_only_when_needed():
    tagged_only = [Operation(operation_id="a", method="get", label="a", tag="x")]

    assert _labels(synthesize(tagged_only).categories) == ["x"]


def test_untagged_category_placed_last_by_default():
    operations = [
        Operation(operation_id="orphan", method="get", label="orphan"),
        Operation(operation_id="a", method="get", label="a", tag="x"),
    ]

    assert _labels(synthesize(operations).categories) == ["x", "UNTAGGED"]

    in_place = GroupingRules(untagged_last=False, untagged_label="Misc")
    assert _labels(synthesize(operations, in_place).categories) == ["Misc", "x"]


def test_untagged_category_does_not_shift_tagged_order():
    operations = [
        Operation(operation_id="a", method="get", label="a", tag="y"),
        Operation(operation_id="orphan", method="get", label="orphan"),
        Operation(operation_id="b", method="get", label="b", tag="x"),
    ]

    assert _labels(synthesize(operations).categories) == ["y", "x", "UNTAGGED"]


@pytest.mark.parametrize("tags", [
    param([], id="no tags"),
    param([""], id="empty tag"),
    param(["   "], id="blank tag"),
])
def test_empty_tags_route_to_untagged(tags: List[str]):
    operations = [Operation(operation_id="a", method="get", label="a", tags=tags)]

    tree = synthesize(operations)

    assert _labels(tree.categories) == ["UNTAGGED"]


def test_first_declared_tag_wins():
    operations = [Operation(operation_id="a", method="get", label="a", tags=["primary", "secondary"])]

    assert _labels(synthesize(operations).categories) == ["primary"]


@pytest.mark.parametrize("method, deprecated, expected", [
    param("get", False, "api-method get", id="get"),
    param("PATCH", False, "api-method patch", id="upper-case patch"),
    param("post", True, "menu__list-item--deprecated api-method post", id="deprecated post"),
    param("head", False, "api-method", id="unknown method"),
    param("", True, "menu__list-item--deprecated api-method", id="deprecated without method"),
])
def test_render_hint(method: str, deprecated: bool, expected: str):
    operations = [Operation(operation_id="op", method=method, label="op", tag="cases", deprecated=deprecated)]

    leaf = synthesize(operations).leaves()[0]

    assert leaf.render_hint == expected


def test_render_hint_helper_matches_leaf():
    assert render_hint("delete") == "api-method delete"
    assert render_hint("delete", deprecated=True) == "menu__list-item--deprecated api-method delete"


def test_deprecation_does_not_change_order_or_collisions():
    operations = [
        Operation(operation_id="resolve", method="get", label="resolve", tag="A", deprecated=True),
        Operation(operation_id="resolve", method="get", label="resolve", tag="A"),
    ]

    leaves = synthesize(operations).leaves()

    assert [leaf.target_id for leaf in leaves] == ["resolve", "resolve_1"]


@pytest.mark.parametrize("operation_id, label, expected_id, expected_label", [
    param("", "Create case", "Create case", "Create case", id="missing id"),
    param("createCase", "", "createCase", "createCase", id="missing label"),
])
def test_missing_identity_is_substituted(operation_id: str, label: str, expected_id: str, expected_label: str):
    operations = [Operation(operation_id=operation_id, method="post", label=label, tag="cases")]

    leaf = synthesize(operations).leaves()[0]

    assert leaf.target_id == expected_id
    assert leaf.label == expected_label


def test_missing_identity_is_fatal():
    operations = [
        Operation(operation_id="fine", method="get", label="fine", tag="a"),
        Operation(operation_id="", method="get", label="  ", tag="a"),
    ]

    with pytest.raises(MalformedOperationError) as exc_info:
        synthesize(operations)

    assert exc_info.value.position == 1
    assert "#1" in str(exc_info.value)


def test_extension_tag_field():
    operations = [
        Operation(operation_id="fill", method="post", label="fill", tag="template",
                  extensions={"x-group": "templates"}),
        Operation(operation_id="list", method="get", label="list", extensions={"x-group": ["templates", "other"]}),
        Operation(operation_id="misc", method="get", label="misc", tag="template"),
    ]

    tree = synthesize(operations, GroupingRules(tag_field="x-group"))

    assert _labels(tree.categories) == ["templates", "UNTAGGED"]
    assert _labels(tree.categories[0].children) == ["fill", "list"]


@pytest.mark.parametrize("rules, extensions", [
    param(GroupingRules(tag_field="summary"), {}, id="unsupported field"),
    param(GroupingRules(tag_field="x-group"), {"x-group": 42}, id="non-string extension"),
    param(GroupingRules(tag_field="x-group"), {"x-group": ["ok", 7]}, id="mixed list extension"),
])
def test_unusable_tag_strategy_is_fatal(rules: GroupingRules, extensions: dict):
    operations = [Operation(operation_id="op", method="get", label="op", extensions=extensions)]

    with pytest.raises(MalformedOperationError):
        synthesize(operations, rules)


def test_overview_node_comes_first():
    rules = GroupingRules(overview_id="docudevs-api", overview_label="DocuDevs API")
    operations = [Operation(operation_id="a", method="get", label="a", tag="x")]

    tree = synthesize(operations, rules)

    assert tree.nodes[0].kind == NodeKind.ROOT
    assert tree.overview.target_id == "docudevs-api"
    assert tree.to_dict()[0] == {"kind": "root", "label": "DocuDevs API", "targetId": "docudevs-api"}


def test_leaf_cannot_take_the_overview_identifier():
    rules = GroupingRules(overview_id="docudevs-api", overview_label="DocuDevs API")
    operations = [Operation(operation_id="docudevsApi", method="get", label="docudevsApi", tag="x")]

    tree = synthesize(operations, rules)

    leaf = tree.leaves()[0]
    assert leaf.target_id == "docudevsApi_1"
    assert leaf.label == "docudevsApi_1"


def test_no_overview_by_default(case_operations: List[Operation]):
    assert synthesize(case_operations).overview is None


def test_empty_operation_list_yields_empty_tree():
    assert synthesize([]).nodes == []


def test_input_operations_are_not_mutated(case_operations: List[Operation]):
    before = [operation.model_dump() for operation in case_operations]

    synthesize(case_operations)

    assert [operation.model_dump() for operation in case_operations] == before


def test_tree_serializes_to_renderer_shape():
    operations = [Operation(operation_id="getCase", method="get", label="getCase", tag="cases")]

    assert synthesize(operations).to_dict() == [
        {
            "kind": "category",
            "label": "cases",
            "children": [
                {
                    "kind": "leaf",
                    "label": "getCase",
                    "targetId": "getCase",
                    "renderHint": "api-method get",
                },
            ],
        },
    ]


def test_shared_synthesizer_across_threads(case_operations: List[Operation]):
    synthesizer = SidebarSynthesizer()
    expected = synthesizer.synthesize(case_operations).to_dict()
    results = []

    def worker():
        results.append(synthesizer.synthesize(case_operations).to_dict())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == [expected] * 8
