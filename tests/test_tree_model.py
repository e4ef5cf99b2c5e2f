"""JSON tree arena, flattening, and search behavior tests.

Covers build order, auto-expansion depth, expand/collapse visibility,
search matching rules, and copy/URL helpers.
"""

from __future__ import annotations

import json
import unittest

from prcomments.tree_model import (
    InvalidJSONError,
    NodeKind,
    build_tree,
    copy_text,
    extract_url,
    filter_visible_nodes,
    find_matching_nodes,
    flatten_tree,
    parse_json_tree,
    scalar_text,
    set_all_expanded,
    subtree_value,
    toggle_expanded,
)

SAMPLE = '{"a": "short", "b": {"c": [1, 2, 3]}}'


def _keys(tree, entries) -> list[str]:
    return [tree.nodes[entry.node].key or "root" for entry in entries]


class BuildTreeTests(unittest.TestCase):
    def test_sample_document_flattens_in_display_order(self) -> None:
        tree = parse_json_tree(SAMPLE)
        entries = flatten_tree(tree)

        self.assertEqual(_keys(tree, entries), ["root", "a", "b", "c", "[0]", "[1]", "[2]"])
        self.assertEqual([entry.depth for entry in entries], [0, 1, 1, 2, 3, 3, 3])
        self.assertEqual([entry.sequence_index for entry in entries], list(range(7)))

    def test_children_keep_document_order_and_parent_links(self) -> None:
        tree = parse_json_tree('{"z": 1, "a": 2, "m": [true, null]}')
        root = tree.root

        self.assertEqual([tree.nodes[i].key for i in root.children], ["z", "a", "m"])
        array = tree.nodes[root.children[2]]
        self.assertEqual(array.kind, NodeKind.ARRAY)
        self.assertEqual([tree.nodes[i].kind for i in array.children], [NodeKind.BOOLEAN, NodeKind.NULL])
        for child in array.children:
            self.assertEqual(tree.parent_of(child).index, array.index)
        self.assertIsNone(tree.parent_of(root.index))

    def test_only_first_two_levels_start_expanded(self) -> None:
        tree = build_tree({"l1": {"l2": {"l3": {"l4": 1}}}})
        by_key = {node.key: node for node in tree.nodes}

        self.assertTrue(tree.root.expanded)
        self.assertTrue(by_key["l1"].expanded)
        self.assertTrue(by_key["l2"].expanded)
        self.assertFalse(by_key["l3"].expanded)
        self.assertEqual(_keys(tree, flatten_tree(tree)), ["root", "l1", "l2", "l3"])

    def test_malformed_json_raises_invalid_json_error(self) -> None:
        with self.assertRaises(InvalidJSONError):
            parse_json_tree('{"a": ')
        with self.assertRaises(ValueError):
            parse_json_tree(b"not json")

    def test_deeply_nested_document_builds_without_recursion(self) -> None:
        value: object = 0
        for _ in range(3000):
            value = [value]
        tree = build_tree(value)

        self.assertEqual(len(tree), 3001)
        self.assertEqual(tree.nodes[-1].depth, 3000)

    def test_subtree_value_rebuilds_decoded_json(self) -> None:
        document = {"a": "short", "b": {"c": [1, 2.5, None, False]}}
        tree = build_tree(document)

        self.assertEqual(subtree_value(tree, tree.ROOT), document)
        b_node = next(node for node in tree.nodes if node.key == "b")
        self.assertEqual(subtree_value(tree, b_node.index), document["b"])


class FlattenTests(unittest.TestCase):
    def test_flatten_is_idempotent_without_state_changes(self) -> None:
        tree = parse_json_tree(SAMPLE)

        self.assertEqual(flatten_tree(tree), flatten_tree(tree))

    def test_collapse_hides_descendants_and_expand_restores_them(self) -> None:
        tree = parse_json_tree(SAMPLE)
        before = flatten_tree(tree)
        b_index = next(node.index for node in tree.nodes if node.key == "b")

        self.assertTrue(toggle_expanded(tree, b_index))
        collapsed = flatten_tree(tree)
        self.assertEqual(_keys(tree, collapsed), ["root", "a", "b"])

        self.assertTrue(toggle_expanded(tree, b_index))
        self.assertEqual(flatten_tree(tree), before)

    def test_toggle_on_leaf_is_a_no_op(self) -> None:
        tree = parse_json_tree(SAMPLE)
        a_index = next(node.index for node in tree.nodes if node.key == "a")

        self.assertFalse(toggle_expanded(tree, a_index))
        self.assertEqual(len(flatten_tree(tree)), 7)

    def test_collapse_all_leaves_only_root(self) -> None:
        tree = parse_json_tree(SAMPLE)
        set_all_expanded(tree, False)

        self.assertEqual(_keys(tree, flatten_tree(tree)), ["root"])


class SearchTests(unittest.TestCase):
    def test_search_matches_keys_and_scalar_values_case_insensitively(self) -> None:
        tree = parse_json_tree('{"Title": "Fix parser", "body": "see TITLE", "n": 10}')
        matches = find_matching_nodes(tree, "title")

        self.assertEqual({tree.nodes[i].key for i in matches}, {"Title", "body"})
        self.assertEqual({tree.nodes[i].key for i in find_matching_nodes(tree, "10")}, {"n"})

    def test_empty_query_matches_nothing(self) -> None:
        tree = parse_json_tree(SAMPLE)

        self.assertEqual(find_matching_nodes(tree, ""), frozenset())

    def test_container_values_are_not_searched(self) -> None:
        tree = parse_json_tree('{"outer": {"inner": "x"}}')
        matches = find_matching_nodes(tree, "inner")

        self.assertEqual({tree.nodes[i].key for i in matches}, {"inner"})

    def test_literals_match_their_json_spelling(self) -> None:
        tree = parse_json_tree('{"flag": true, "missing": null}')

        self.assertEqual({tree.nodes[i].key for i in find_matching_nodes(tree, "true")}, {"flag"})
        self.assertEqual({tree.nodes[i].key for i in find_matching_nodes(tree, "null")}, {"missing"})

    def test_filter_keeps_ancestors_of_matches_visible(self) -> None:
        tree = parse_json_tree('{"a": 1, "b": {"c": {"needle": 2}, "d": 3}}')
        matches = find_matching_nodes(tree, "needle")
        visible = filter_visible_nodes(tree, matches)
        set_all_expanded(tree, True)

        entries = flatten_tree(tree, matches, visible)
        self.assertEqual(_keys(tree, entries), ["root", "b", "c", "needle"])
        self.assertEqual([entry.matches_search for entry in entries], [False, False, False, True])


class NodeValueTests(unittest.TestCase):
    def test_scalar_text_uses_json_spelling(self) -> None:
        self.assertEqual(scalar_text(NodeKind.BOOLEAN, True), "true")
        self.assertEqual(scalar_text(NodeKind.NULL, None), "null")
        self.assertEqual(scalar_text(NodeKind.NUMBER, 1.5), "1.5")
        self.assertEqual(scalar_text(NodeKind.STRING, "plain"), "plain")

    def test_copy_text_serializes_containers_and_unquotes_strings(self) -> None:
        tree = parse_json_tree(SAMPLE)
        a_index = next(node.index for node in tree.nodes if node.key == "a")
        b_index = next(node.index for node in tree.nodes if node.key == "b")

        self.assertEqual(copy_text(tree, a_index), "short")
        self.assertEqual(json.loads(copy_text(tree, b_index)), {"c": [1, 2, 3]})
        self.assertIn("\n", copy_text(tree, b_index))

    def test_extract_url_from_string_values_and_url_keys(self) -> None:
        tree = parse_json_tree(
            '{"html_url": "https://example.com/pr/1", "note": "see http://x.test/a b", '
            '"plain": "no link here", "count": 3}'
        )
        by_key = {node.key: node.index for node in tree.nodes}

        self.assertEqual(extract_url(tree, by_key["html_url"]), "https://example.com/pr/1")
        self.assertEqual(extract_url(tree, by_key["note"]), "http://x.test/a")
        self.assertIsNone(extract_url(tree, by_key["plain"]))
        self.assertIsNone(extract_url(tree, by_key["count"]))
        self.assertIsNone(extract_url(tree, tree.ROOT))


if __name__ == "__main__":
    unittest.main()
