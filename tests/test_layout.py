"""Tests for syntaxtree.layout.drawable."""
from __future__ import annotations

import pytest

from syntaxtree.config import Alignment, RenderOptions
from syntaxtree.layout import (
    NODE_PADDING,
    calculate_auto_subscript,
    calculate_drawable_positions,
    case_text,
    drawable_from_node,
    feature_text,
    find_target,
    get_max_depth,
    label_lines,
    layout,
    parse_feature,
)
from syntaxtree.notation import parse, parse_phrase, tokenize

SENTENCE = "[S [NP John][VP [V runs]]]"


def _layout(text: str, measurer, **opts):
    return layout(parse_phrase(text), measurer, RenderOptions(**opts))


def _by_label(root):
    return {d.label: d for d in root.walk() if not d.is_root}


def test_widths_cover_children(measurer) -> None:
    root = drawable_from_node(measurer, parse_phrase(SENTENCE), 16)
    nodes = _by_label(root)
    assert nodes["John"].width == 4 * 8 + NODE_PADDING
    assert nodes["NP"].width == 52
    assert nodes["VP"].width == 52
    assert nodes["S"].width == 104
    assert root.width == 104
    assert root.is_root and root.depth == -1
    for d in root.walk():
        if d.children:
            assert d.width >= sum(c.width for c in d.children)


def test_subscript_widens_label(measurer) -> None:
    root = drawable_from_node(measurer, parse_phrase("[NP_sub x]"), 16)
    # 2 chars + padding, plus the script at three quarters on both sides
    assert root.children[0].width == 16 + NODE_PADDING + 3 * 8 * 0.75 * 2


def test_feature_text_widens_label(measurer) -> None:
    root = drawable_from_node(measurer, parse_phrase("[X +FEAT [Y Z]]"), 16)
    x = root.children[0]
    assert x.features == ["+FEAT"]
    assert x.width == len("[+FEAT]") * 8


def test_multi_line_label_uses_widest_line(measurer) -> None:
    root = drawable_from_node(measurer, parse_phrase(r'["ab\ncdef" x]'), 16)
    assert root.children[0].width == 4 * 8 + NODE_PADDING


def test_case_feature_on_leaf(measurer) -> None:
    root = drawable_from_node(measurer, parse_phrase("[NP THE CAT {Acc}]"), 16)
    leaf = root.leaves()[0]
    assert leaf.label == "THE CAT"
    assert leaf.case_feature == "{Acc}"
    assert leaf.width == 7 * 8 + NODE_PADDING


def test_wide_case_feature_sets_width(measurer) -> None:
    root = drawable_from_node(measurer, parse_phrase('[N "a" {Accusative}]'), 16)
    leaf = root.leaves()[0]
    assert leaf.label == "a"
    assert leaf.width == pytest.approx(len("[Accusative]") * 8 * 0.7 + NODE_PADDING)


def test_case_only_leaf_drops_case(measurer) -> None:
    root = drawable_from_node(measurer, parse(tokenize("{Acc}")), 16)
    leaf = root.leaves()[0]
    assert leaf.label == "{Acc}"
    assert leaf.case_feature is None


def test_top_aligned_positions(measurer) -> None:
    nodes = _by_label(_layout(SENTENCE, measurer))
    expected = {
        "S": (0, 0, 10),
        "NP": (1, 0, 58),
        "John": (2, 0, 106),
        "VP": (1, 52, 58),
        "V": (2, 52, 106),
        "runs": (3, 52, 154),
    }
    for label, (depth, left, top) in expected.items():
        assert (nodes[label].depth, nodes[label].left, nodes[label].top) == (depth, left, top), label


def test_vertical_scale_stretches_rows(measurer) -> None:
    nodes = _by_label(_layout(SENTENCE, measurer, vertical_scale=2))
    assert nodes["NP"].top == 1 * 16 * 3 * 2 + 10


def test_leaves_aligned(measurer) -> None:
    nodes = _by_label(_layout(SENTENCE, measurer, alignment=Alignment.LEAVES_ALIGNED))
    assert nodes["John"].depth == nodes["runs"].depth == 3
    assert nodes["John"].top == 154
    assert nodes["NP"].depth == 1


def test_bottom_aligned(measurer) -> None:
    nodes = _by_label(_layout(SENTENCE, measurer, alignment="bottom"))
    assert nodes["John"].depth == 3
    assert nodes["NP"].depth == 2
    assert nodes["V"].depth == 2
    assert nodes["VP"].depth == 1
    assert nodes["S"].depth == 0


def test_bottom_aligned_keeps_childless_branch(measurer) -> None:
    nodes = _by_label(_layout("[S [A][B c][D [E f]]]", measurer, alignment="bottom"))
    assert nodes["A"].depth == 1
    assert nodes["B"].depth == 2
    assert nodes["D"].depth == 1


@pytest.mark.parametrize("alignment", list(Alignment))
def test_depth_increases_toward_leaves(measurer, alignment: Alignment) -> None:
    root = _layout("[S [NP [D the][N dog]][VP [V ran][PP [P to][NP town]]]]", measurer, alignment=alignment)
    for d in root.walk():
        for child in d.children:
            assert child.depth > d.depth


def test_children_left_packed_inside_parent(measurer) -> None:
    root = _layout("[S [NP the dog][VP [V chased][NP a cat]]]", measurer)
    for d in root.walk():
        offset = d.left
        for child in d.children:
            assert child.left == offset
            offset += child.width
        assert offset <= d.left + d.width


def test_auto_subscript_numbers_repeated_labels(measurer) -> None:
    nodes = [d for d in _layout("[S [NP a][VP [V b][NP c]]]", measurer).walk() if d.label == "NP"]
    assert [d.subscript for d in nodes] == ["1", "2"]


def test_auto_subscript_skips_explicit_scripts_and_unique_labels(measurer) -> None:
    root = _layout("[S [NP_x a][VP [NP b][NP c]]]", measurer)
    nps = [d for d in root.walk() if d.label == "NP"]
    assert [d.subscript for d in nps] == ["x", "1", "2"]
    assert _by_label(root)["VP"].subscript is None
    assert all(leaf.subscript is None for leaf in root.leaves())


def test_auto_subscript_off(measurer) -> None:
    root = _layout("[S [NP a][NP b]]", measurer, auto_subscript=False)
    assert all(d.subscript is None for d in root.walk())


def test_auto_subscript_is_idempotent(measurer) -> None:
    root = _layout("[S [NP a][NP b]]", measurer)
    calculate_auto_subscript(root)
    assert [d.subscript for d in root.walk() if d.label == "NP"] == ["1", "2"]


def test_max_depth(measurer) -> None:
    assert get_max_depth(_layout(SENTENCE, measurer)) == 3


def test_find_target(measurer) -> None:
    root = _layout("[A [B C][D E][F G ->1]]", measurer)
    assert find_target(root, 1).label == "C"
    assert find_target(root, 3).label == "G"
    assert find_target(root, 4) is None
    assert find_target(root, 0) is None


def test_label_lines() -> None:
    assert label_lines("a\\nb") == ["a", "b"]
    assert label_lines("a\nb") == ["a", "b"]
    assert label_lines("ab") == ["ab"]


def test_case_text() -> None:
    assert case_text("{Acc}") == "[Acc]"
    long = "{" + "x" * 150 + "}"
    text = case_text(long)
    assert text == "[" + "x" * 99 + "…]"


@pytest.mark.parametrize(
    "feature, expected",
    [
        ("+PAST", ("+PAST", None, None)),
        ("+PAST->1", ("+PAST", "->", 1)),
        ("+Q.>12", ("+Q", ".>", 12)),
        ("+WH->", ("+WH->", None, None)),
    ],
)
def test_parse_feature(feature: str, expected: tuple) -> None:
    assert parse_feature(feature) == expected


def test_feature_text_hides_arrow_suffix() -> None:
    assert feature_text(["+PAST->1", "+3SG"]) == "[+PAST, +3SG]"


def test_to_dict(measurer) -> None:
    data = _layout("[N_s x]", measurer).to_dict()
    n = data["children"][0]
    assert n["label"] == "N"
    assert n["subscript"] == "s"
    assert n["children"][0]["is_leaf"] is True


@pytest.mark.parametrize(
    "text, expected",
    [("[A [B C ->1]]", True), ("[A [B C][D E <>1 moved]]", True), (SENTENCE, False)],
)
def test_positions_report_arrows(measurer, text: str, expected: bool) -> None:
    """The position phase reports whether any leaf carries an arrow directive."""
    root = drawable_from_node(measurer, parse_phrase(text), 16)
    assert calculate_drawable_positions(root, 16) is expected


def test_layout_keeps_arrow_flag_on_root(measurer) -> None:
    assert _layout("[A [B C ->1]]", measurer).has_arrows is True
    assert _layout(SENTENCE, measurer).has_arrows is False
    # out-of-range targets still count as directives
    assert _layout("[A [B C ->9]]", measurer).has_arrows is True
